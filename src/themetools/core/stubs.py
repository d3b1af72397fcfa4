"""
Bundled stub templates for ``setup`` and ``update``.

Stubs live under ``themetools/stubs/{stack}/`` (stack specific) and
``themetools/stubs/common/`` (shared by both stacks), laid out relative to the
application's resource root. Publishing copies them byte-for-byte.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from .app_css import add_starter_imports, ensure_theme_mappings
from .config import ThemeToolsConfig
from .documents import Document, write_file
from .entrypoints import add_color_theme_init, find_entry_file
from .errors import StubError
from .installer import ApplyReport, FileAction

logger = logging.getLogger(__name__)

STUBS_ROOT = Path(__file__).parent.parent / "stubs"

STACKS = ("react", "vue")

STACK_LABELS = {
    "react": "Inertia React",
    "vue": "Inertia Vue",
}


class SetupMode(StrEnum):
    STARTER = "starter"
    STANDALONE = "standalone"


# Files shared by every setup, relative to the resource root
_COMMON_FILES = (
    "js/conf/themes.ts",
    "css/themes/rose.css",
    "css/themes/ocean.css",
)

_STATE_FILES = {
    "react": "js/hooks/use-color-theme.tsx",
    "vue": "js/composables/useColorTheme.ts",
}

SWITCHER_FILES = {
    "react": "js/components/theme-switcher.tsx",
    "vue": "js/components/ThemeSwitcher.vue",
}


def stub_files(stack: str, mode: SetupMode) -> list[str]:
    """Resource-relative paths published by ``setup`` for a stack and mode."""
    if stack not in STACKS:
        raise StubError(f"Unknown stack '{stack}'. Expected one of: {', '.join(STACKS)}")
    files = [_COMMON_FILES[0], _STATE_FILES[stack]]
    if mode == SetupMode.STARTER:
        files.append(SWITCHER_FILES[stack])
    files.extend(_COMMON_FILES[1:])
    return files


def stub_path(stack: str, relative: str) -> Path:
    """
    Locate a bundled stub, preferring the stack directory over ``common``.

    Raises:
        StubError: If neither directory holds the stub
    """
    for base in (STUBS_ROOT / stack, STUBS_ROOT / "common"):
        candidate = base / relative
        if candidate.is_file():
            return candidate
    raise StubError(f"Missing stub file: {STUBS_ROOT / stack / relative}")


def detect_stack(resources: Path) -> str:
    """Guess the front-end stack from files already in the application."""
    if (resources / SWITCHER_FILES["react"]).exists():
        return "react"
    if (resources / SWITCHER_FILES["vue"]).exists():
        return "vue"
    if (resources / "js/app.tsx").exists():
        return "react"
    return "vue"


@dataclass
class StubPublisher:
    """Copies stubs into one application's resource root."""

    config: ThemeToolsConfig
    stack: str

    def publish(self, relative: str, report: ApplyReport, overwrite: bool = True) -> Path:
        source = stub_path(self.stack, relative)
        destination = self.config.resource(relative)
        content = source.read_text(encoding="utf-8")

        if destination.exists():
            if destination.read_text(encoding="utf-8") == content:
                report.add(destination, FileAction.UNCHANGED)
                return destination
            if not overwrite:
                report.add(destination, FileAction.UNCHANGED, "kept existing file")
                return destination
            write_file(destination, content)
            report.add(destination, FileAction.UPDATED)
            return destination

        write_file(destination, content)
        report.add(destination, FileAction.CREATED)
        return destination


def run_setup(
    config: ThemeToolsConfig,
    stack: str,
    mode: SetupMode = SetupMode.STARTER,
    overwrite: bool = False,
) -> ApplyReport:
    """
    Publish the theme tooling for a stack and wire it into the application.

    1. copy the stubs for ``mode``
    2. import the starter themes in ``app.css`` and add the variable mappings
    3. initialise the colour theme in the app entry file

    Every stub is checked before anything is written, so a missing template
    leaves the application untouched. Files that already exist are kept
    unless ``overwrite`` is set.

    Raises:
        StubError: If a bundled template is missing
    """
    files = stub_files(stack, mode)
    for relative in files:
        stub_path(stack, relative)

    report = ApplyReport(f"{stack} {mode}")
    publisher = StubPublisher(config, stack)
    for relative in files:
        publisher.publish(relative, report, overwrite=overwrite)

    _patch_app_css(config, report)
    _patch_entry_file(config, stack, report)
    return report


def run_update(config: ThemeToolsConfig, stack: str | None = None) -> ApplyReport:
    """Overwrite the theme switcher component with the bundled version."""
    stack = stack or detect_stack(config.resources)
    logger.debug("Updating switcher component for %s", stack)
    report = ApplyReport(stack)
    StubPublisher(config, stack).publish(SWITCHER_FILES[stack], report)
    return report


def _patch_app_css(config: ThemeToolsConfig, report: ApplyReport) -> None:
    path = config.app_css_path
    if not path.exists():
        logger.warning("app.css not found, skipping CSS imports update.")
        report.add(path, FileAction.MISSING, "app.css not found, imports skipped")
        return

    doc = Document.load(path)
    doc.text = add_starter_imports(doc.text).text
    doc.text = ensure_theme_mappings(doc.text).text
    if doc.save():
        report.add(path, FileAction.UPDATED, "theme imports and variable mappings")
    else:
        report.add(path, FileAction.UNCHANGED)


def _patch_entry_file(config: ThemeToolsConfig, stack: str, report: ApplyReport) -> None:
    path = find_entry_file(config.resources, stack)
    if path is None:
        logger.info("No %s entry file found, skipping initialisation", stack)
        return

    doc = Document.load(path)
    doc.text = add_color_theme_init(doc.text, stack).text
    if doc.save():
        report.add(path, FileAction.UPDATED, "initialises the colour theme")
    else:
        report.add(path, FileAction.UNCHANGED)
