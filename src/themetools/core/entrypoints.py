"""
App entry file patches.

Setup wires ``initializeColorTheme`` into the Inertia entry file next to the
existing ``initializeTheme`` (appearance) call.
"""

from __future__ import annotations

from pathlib import Path

from .patcher import Anchor, PatchResult, PatchStatus, insert_once

INIT_CALL = "initializeColorTheme();"
INIT_CALL_PRESENT = r"\binitializeColorTheme\(\);"
INIT_IMPORT_PRESENT = r"import\s*\{[^}]*\binitializeColorTheme\b[^}]*\}"

REACT_IMPORT = "import { initializeColorTheme } from './hooks/use-color-theme';"
VUE_IMPORT = "import { initializeColorTheme } from './composables/useColorTheme';"

_CALL_ANCHORS = (
    Anchor.after_first(r"\binitializeTheme\(\);"),
    Anchor.before_first(r"\bcreateInertiaApp\(\{", separator="\n\n"),
)

_REACT_IMPORT_ANCHORS = (
    Anchor.after_first(r"""import\s*\{\s*initializeTheme\s*\}\s*from\s*['"]\./hooks/use-appearance['"];"""),
    Anchor.after_last(r"(?m)^import\b[^;]*;"),
)

_VUE_IMPORT_ANCHORS = (
    Anchor.before_first(r"import\s*\{\s*initializeTheme\s*\}"),
    Anchor.after_last(r"(?m)^import\b[^;]*;"),
)

ENTRY_FILES = {
    "react": ("js/app.tsx",),
    "vue": ("js/app.ts", "js/app.js"),
}


def find_entry_file(resources: Path, stack: str) -> Path | None:
    """First existing entry file for a stack, or None."""
    for candidate in ENTRY_FILES[stack]:
        path = resources / candidate
        if path.exists():
            return path
    return None


def add_color_theme_init(text: str, stack: str) -> PatchResult:
    """Import and call ``initializeColorTheme`` once."""
    if stack == "react":
        import_line, import_anchors = REACT_IMPORT, _REACT_IMPORT_ANCHORS
    else:
        import_line, import_anchors = VUE_IMPORT, _VUE_IMPORT_ANCHORS

    imported = insert_once(text, import_line, import_anchors, present=INIT_IMPORT_PRESENT)
    called = insert_once(imported.text, INIT_CALL, _CALL_ANCHORS, present=INIT_CALL_PRESENT)

    if imported.changed or called.changed:
        return PatchResult(called.text, PatchStatus.APPLIED)
    return PatchResult(text, PatchStatus.ALREADY_PRESENT)
