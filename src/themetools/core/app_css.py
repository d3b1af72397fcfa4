"""
Patches for the shared ``app.css`` entry stylesheet.

Every installed theme contributes one ``@import './themes/{id}.css';`` line.
Insertion points are ordered anchor rules:

1. after the last existing theme import
2. after ``@import 'tw-animate-css';``
3. before the first ``@source`` directive
4. top of the file
"""

from __future__ import annotations

import re

from .patcher import (
    Anchor,
    PatchResult,
    PatchStatus,
    find_balanced,
    insert_once,
    remove,
    remove_block,
    replace_once,
)

THEME_IMPORT = r"""@import\s+["']\./themes/[^"']+\.css["'];"""
TW_ANIMATE_IMPORT = r"""@import\s+["']tw-animate-css["'];"""
SOURCE_DIRECTIVE = r"@source\b"

THEME_IMPORT_ANCHORS = (
    Anchor.after_last(THEME_IMPORT),
    Anchor.after_first(TW_ANIMATE_IMPORT),
    Anchor.before_first(SOURCE_DIRECTIVE),
)

# Setup-time starter imports keep a blank line around the block
STARTER_IMPORT_ANCHORS = (
    Anchor.after_last(THEME_IMPORT),
    Anchor.after_first(TW_ANIMATE_IMPORT, separator="\n\n"),
    Anchor.before_first(SOURCE_DIRECTIVE, separator="\n\n"),
)

STARTER_THEMES = ("rose", "ocean")


def theme_import(theme_id: str) -> str:
    return f"@import './themes/{theme_id}.css';"


def theme_import_pattern(theme_id: str) -> str:
    """Matches the import for one theme in either quote style and path form."""
    tid = re.escape(theme_id)
    return rf"""@import\s+["'](?:\./themes/|\.\./css/themes/){tid}\.css["'];"""


def add_theme_import(text: str, theme_id: str) -> PatchResult:
    return insert_once(
        text,
        theme_import(theme_id),
        THEME_IMPORT_ANCHORS,
        present=theme_import_pattern(theme_id),
    )


def remove_theme_import(text: str, theme_id: str) -> PatchResult:
    return remove(text, theme_import_pattern(theme_id))


def installed_theme_imports(text: str) -> list[str]:
    """Theme ids imported by the stylesheet, in document order."""
    return re.findall(r"""@import\s+["'](?:\./themes/|\.\./css/themes/)([^"']+)\.css["'];""", text)


def add_starter_imports(text: str, theme_ids: tuple[str, ...] = STARTER_THEMES) -> PatchResult:
    status = PatchStatus.ALREADY_PRESENT
    for theme_id in theme_ids:
        result = insert_once(
            text,
            theme_import(theme_id),
            STARTER_IMPORT_ANCHORS,
            present=theme_import_pattern(theme_id),
        )
        if result.changed:
            text = result.text
            status = PatchStatus.APPLIED
    return PatchResult(text, status)


# =============================================================================
# Variable mappings (setup)
# =============================================================================

THEME_MAPPINGS = """    /* Shadow mappings for theme support */
    --shadow-2xs: var(--shadow-2xs);
    --shadow-xs: var(--shadow-xs);
    --shadow-sm: var(--shadow-sm);
    --shadow: var(--shadow);
    --shadow-md: var(--shadow-md);
    --shadow-lg: var(--shadow-lg);
    --shadow-xl: var(--shadow-xl);
    --shadow-2xl: var(--shadow-2xl);

    /* Font mappings for theme support */
    --font-sans: var(--font-sans);
    --font-mono: var(--font-mono);
    --font-serif: var(--font-serif);"""

ROOT_DEFAULTS = """    /* Default fonts */
    --font-sans: 'Instrument Sans', ui-sans-serif, system-ui, sans-serif, 'Apple Color Emoji', 'Segoe UI Emoji', 'Segoe UI Symbol', 'Noto Color Emoji';
    --font-mono: ui-monospace, SFMono-Regular, Menlo, Monaco, Consolas, 'Liberation Mono', 'Courier New', monospace;
    --font-serif: ui-serif, Georgia, Cambria, 'Times New Roman', Times, serif;

    /* Default shadows (Tailwind defaults) */
    --shadow-2xs: 0 1px rgb(0 0 0 / 0.05);
    --shadow-xs: 0 1px 2px 0 rgb(0 0 0 / 0.05);
    --shadow-sm: 0 1px 3px 0 rgb(0 0 0 / 0.1), 0 1px 2px -1px rgb(0 0 0 / 0.1);
    --shadow: 0 1px 3px 0 rgb(0 0 0 / 0.1), 0 1px 2px -1px rgb(0 0 0 / 0.1);
    --shadow-md: 0 4px 6px -1px rgb(0 0 0 / 0.1), 0 2px 4px -2px rgb(0 0 0 / 0.1);
    --shadow-lg: 0 10px 15px -3px rgb(0 0 0 / 0.1), 0 4px 6px -4px rgb(0 0 0 / 0.1);
    --shadow-xl: 0 20px 25px -5px rgb(0 0 0 / 0.1), 0 8px 10px -6px rgb(0 0 0 / 0.1);
    --shadow-2xl: 0 25px 50px -12px rgb(0 0 0 / 0.25);"""

_UTILITIES_LAYER = r"@layer\s+utilities\s*\{"
_BODY_FONT_OVERRIDE = r"body,\s*html\s*\{[^}]*--font-sans:"
_THEME_BLOCK = re.compile(r"@theme(?:\s+inline)?\s*\{")
_ROOT_BLOCK = re.compile(r":root\s*\{")


def _append_to_block(text: str, opener: re.Pattern[str], body: str) -> str:
    """Append ``body`` just before the closing brace of the first matching block."""
    match = opener.search(text)
    if match is None:
        return text
    close = find_balanced(text, match.end() - 1, line_comments=False)
    head = text[:close].rstrip(" \t")
    return head + "\n" + body + "\n" + text[close:]


def ensure_theme_mappings(text: str) -> PatchResult:
    """
    Prepare ``app.css`` for class-scoped themes.

    - point ``--color-sidebar`` at ``--sidebar``
    - drop a ``@layer utilities`` block that pins ``--font-sans`` on body/html
    - apply ``font-sans`` on the body
    - map shadow and font variables inside ``@theme``
    - declare default fonts and shadows in ``:root``
    """
    original = text

    text = replace_once(
        text,
        "--color-sidebar: var(--sidebar-background);",
        "--color-sidebar: var(--sidebar);",
    ).text
    text = remove_block(text, _UTILITIES_LAYER, _BODY_FONT_OVERRIDE, line_comments=False).text

    if "@apply bg-background text-foreground;" in text and "font-sans" not in text:
        text = replace_once(
            text,
            "@apply bg-background text-foreground;",
            "@apply bg-background text-foreground font-sans;",
        ).text

    if "--shadow-2xs: var(--shadow-2xs);" not in text:
        text = _append_to_block(text, _THEME_BLOCK, THEME_MAPPINGS)

    if "--shadow-2xs: 0 1px rgb(0 0 0 / 0.05);" not in text:
        text = _append_to_block(text, _ROOT_BLOCK, ROOT_DEFAULTS)

    status = PatchStatus.APPLIED if text != original else PatchStatus.ALREADY_PRESENT
    return PatchResult(text, status)
