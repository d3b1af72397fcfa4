"""
Theme installation and removal.

A theme touches three documents, each read, patched and written on its own:

1. ``css/themes/{id}.css`` (owned by the theme)
2. ``css/app.css`` (shared, one import line per theme)
3. ``js/conf/themes.ts`` (shared registry)

There is no cross-file transaction. When a later document fails after an
earlier one was written, PartialApplyError names the files already changed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from .app_css import add_theme_import, installed_theme_imports, remove_theme_import
from .config import ThemeToolsConfig
from .css_renderer import render_theme_css
from .documents import Document, write_file
from .errors import (
    PartialApplyError,
    ProtectedThemeError,
    StructureParseError,
    ThemeNotFoundError,
    ThemeToolsError,
    make_structure_error,
)
from .models import ThemeDefinition, ThemeRecord, build_record
from .patcher import PatchStatus
from .registry import ThemeRegistry
from .strings import slugify, title_case

logger = logging.getLogger(__name__)


class FileAction(StrEnum):
    """What happened to one target file."""

    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    DELETED = "deleted"
    MISSING = "missing"


@dataclass
class FileChange:
    path: Path
    action: FileAction
    detail: str = ""


@dataclass
class ApplyReport:
    """Per-file outcome of an install or removal."""

    subject: str
    changes: list[FileChange] = field(default_factory=list)

    def add(self, path: Path, action: FileAction, detail: str = "") -> None:
        self.changes.append(FileChange(path, action, detail))

    @property
    def written(self) -> list[Path]:
        return [
            c.path
            for c in self.changes
            if c.action in (FileAction.CREATED, FileAction.UPDATED, FileAction.DELETED)
        ]

    @property
    def changed(self) -> bool:
        return bool(self.written)


@dataclass
class PreparedTheme:
    """Everything needed to write a theme, computed before touching files."""

    theme_id: str
    display_name: str
    record: ThemeRecord
    css: str


def prepare_theme(
    definition: ThemeDefinition,
    fallback_name: str,
    name: str | None = None,
    description: str | None = None,
) -> PreparedTheme:
    """
    Derive the id, display name, registry record and CSS for a definition.

    The raw name is the ``name`` override, else the definition's name, else
    ``fallback_name`` (usually derived from the source URL).
    """
    raw_name = name or definition.name or fallback_name
    theme_id = slugify(raw_name)
    if not theme_id:
        raise ThemeToolsError(f"Cannot derive a theme id from name {raw_name!r}")

    display_name = title_case(raw_name)
    record = build_record(theme_id, display_name, definition.css_vars, description)
    return PreparedTheme(
        theme_id=theme_id,
        display_name=display_name,
        record=record,
        css=render_theme_css(definition, theme_id),
    )


class ThemeInstaller:
    """Applies and reverts themes against one application's resources."""

    def __init__(self, config: ThemeToolsConfig):
        self.config = config

    # -- queries ----------------------------------------------------------------

    def css_exists(self, theme_id: str) -> bool:
        return self.config.theme_css_path(theme_id).exists()

    def is_installed(self, theme_id: str) -> bool:
        """True if any of the theme's three artefacts is present."""
        if theme_id in self.config.protected_themes or self.css_exists(theme_id):
            return True
        app_css = self.config.app_css_path
        if app_css.exists() and theme_id in installed_theme_imports(app_css.read_text(encoding="utf-8")):
            return True
        registry = self.config.registry_path
        if registry.exists():
            try:
                return ThemeRegistry.parse(registry.read_text(encoding="utf-8"), registry).has(theme_id)
            except StructureParseError:
                return False
        return False

    def available_themes(self) -> list[str]:
        """Installed theme ids (CSS files) plus protected ones, sorted."""
        themes = set(self.config.protected_themes)
        themes_dir = self.config.themes_path
        if themes_dir.is_dir():
            themes.update(p.stem for p in themes_dir.glob("*.css"))
        return sorted(themes)

    def load_registry(self) -> ThemeRegistry | None:
        path = self.config.registry_path
        if not path.exists():
            return None
        return ThemeRegistry.parse(path.read_text(encoding="utf-8"), path)

    # -- install ----------------------------------------------------------------

    def install(self, theme: PreparedTheme, replace: bool = False) -> ApplyReport:
        """
        Write the CSS file, the app.css import and the registry entry.

        Without ``replace`` an existing CSS file and registry entry are kept
        as they are; with it both are regenerated.

        Raises:
            PartialApplyError: If a document fails after another was written
            StructureParseError: If the first document to fail left nothing
                written (shape of app.css or the registry not recognised)
        """
        report = ApplyReport(theme.theme_id)
        steps: list[tuple[Path, Callable[[ApplyReport], None]]] = [
            (self.config.theme_css_path(theme.theme_id), lambda r: self._write_css(theme, replace, r)),
            (self.config.app_css_path, lambda r: self._add_import(theme.theme_id, r)),
            (self.config.registry_path, lambda r: self._register(theme.record, replace, r)),
        ]
        self._run(steps, report)
        return report

    def _write_css(self, theme: PreparedTheme, replace: bool, report: ApplyReport) -> None:
        path = self.config.theme_css_path(theme.theme_id)
        if path.exists():
            current = path.read_text(encoding="utf-8")
            if current == theme.css or not replace:
                report.add(path, FileAction.UNCHANGED, "theme CSS already exists")
                return
            write_file(path, theme.css)
            report.add(path, FileAction.UPDATED)
            return
        write_file(path, theme.css)
        report.add(path, FileAction.CREATED)

    def _add_import(self, theme_id: str, report: ApplyReport) -> None:
        path = self.config.app_css_path
        if not path.exists():
            raise make_structure_error("app.css not found", path)
        doc = Document.load(path)
        result = add_theme_import(doc.text, theme_id)
        doc.text = result.text
        if doc.save():
            report.add(path, FileAction.UPDATED)
        else:
            report.add(path, FileAction.UNCHANGED, "app.css already contains the import")

    def _register(self, record: ThemeRecord, replace: bool, report: ApplyReport) -> None:
        path = self.config.registry_path
        if not path.exists():
            raise make_structure_error("theme registry not found", path)
        doc = Document.load(path)
        registry = ThemeRegistry.parse(doc.text, path)
        status = registry.add(record, replace=replace)
        if status == PatchStatus.ALREADY_PRESENT:
            report.add(path, FileAction.UNCHANGED, "registry already contains this theme")
            return
        doc.text = registry.serialize()
        doc.save()
        report.add(path, FileAction.UPDATED)

    # -- remove -----------------------------------------------------------------

    def check_removable(self, theme_id: str) -> None:
        """Raise unless ``theme_id`` is an installed, unprotected theme."""
        if self.config.is_protected(theme_id):
            raise ProtectedThemeError(f"The '{theme_id}' theme is protected and cannot be removed.")
        if not self.is_installed(theme_id):
            raise ThemeNotFoundError(f"Theme '{theme_id}' does not exist.")

    def remove(self, theme_id: str) -> ApplyReport:
        """
        Delete the CSS file, the app.css import and the registry entry.

        Raises:
            ProtectedThemeError: For protected ids; nothing is touched
            ThemeNotFoundError: If none of the artefacts exist
            PartialApplyError: If a document fails after another was written
        """
        self.check_removable(theme_id)

        report = ApplyReport(theme_id)
        steps: list[tuple[Path, Callable[[ApplyReport], None]]] = [
            (self.config.theme_css_path(theme_id), lambda r: self._delete_css(theme_id, r)),
            (self.config.app_css_path, lambda r: self._remove_import(theme_id, r)),
            (self.config.registry_path, lambda r: self._unregister(theme_id, r)),
        ]
        self._run(steps, report)
        return report

    def _delete_css(self, theme_id: str, report: ApplyReport) -> None:
        path = self.config.theme_css_path(theme_id)
        if path.exists():
            path.unlink()
            report.add(path, FileAction.DELETED)
        else:
            report.add(path, FileAction.MISSING, "CSS file not found")

    def _remove_import(self, theme_id: str, report: ApplyReport) -> None:
        path = self.config.app_css_path
        if not path.exists():
            report.add(path, FileAction.MISSING, "app.css not found")
            return
        doc = Document.load(path)
        result = remove_theme_import(doc.text, theme_id)
        if result.status == PatchStatus.NOT_FOUND:
            report.add(path, FileAction.UNCHANGED, "import not found in app.css")
            return
        doc.text = result.text
        doc.save()
        report.add(path, FileAction.UPDATED)

    def _unregister(self, theme_id: str, report: ApplyReport) -> None:
        path = self.config.registry_path
        if not path.exists():
            report.add(path, FileAction.MISSING, "theme registry not found")
            return
        doc = Document.load(path)
        registry = ThemeRegistry.parse(doc.text, path)
        if registry.remove(theme_id) == PatchStatus.NOT_FOUND:
            report.add(path, FileAction.UNCHANGED, "theme not found in registry")
            return
        doc.text = registry.serialize()
        doc.save()
        report.add(path, FileAction.UPDATED)

    # -- shared -----------------------------------------------------------------

    def _run(
        self,
        steps: list[tuple[Path, Callable[[ApplyReport], None]]],
        report: ApplyReport,
    ) -> None:
        """Run file steps in order, stopping at the first failure."""
        for path, step in steps:
            try:
                step(report)
            except (ThemeToolsError, OSError) as e:
                logger.debug("Step for %s failed: %s", path, e)
                if not report.written:
                    raise
                raise PartialApplyError(
                    f"Failed to update {path}: {e}",
                    updated=report.written,
                    failed=path,
                ) from e
