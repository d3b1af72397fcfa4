"""
Google Fonts import derivation.

Inspects the font-stack variables of a theme and produces one stylesheet
import per concrete font family. Generic CSS keywords and ``var(...)``
references never produce an import.
"""

from __future__ import annotations

from collections.abc import Iterable
from urllib.parse import quote_plus

from .models import SECTIONS, ThemeVariableMap, primary_font_name

FONT_KEYS = ("font-sans", "font-serif", "font-mono")

GENERIC_FONT_FAMILIES = frozenset(
    {
        "serif",
        "sans-serif",
        "monospace",
        "cursive",
        "fantasy",
        "system-ui",
        "ui-sans-serif",
        "ui-serif",
        "ui-monospace",
        "inherit",
    }
)

GOOGLE_FONTS_IMPORT = "@import url('https://fonts.googleapis.com/css2?family={family}&display=swap');"


def font_family(value: str) -> str | None:
    """
    Return the importable family of a font stack, or None.

    Examples:
        >>> font_family("Instrument Sans, sans-serif")
        'Instrument Sans'
        >>> font_family("system-ui, sans-serif") is None
        True
    """
    if not value or value.strip().startswith("var("):
        return None
    family = primary_font_name(value)
    if not family or family.startswith("var("):
        return None
    if family.lower() in GENERIC_FONT_FAMILIES:
        return None
    return family


def font_import(family: str) -> str:
    """Format the import directive for one family (form-encoded, spaces as ``+``)."""
    return GOOGLE_FONTS_IMPORT.format(family=quote_plus(family))


def derive_font_families(
    css_vars: ThemeVariableMap,
    font_keys: Iterable[str] = FONT_KEYS,
    sections: Iterable[str] = SECTIONS,
) -> list[str]:
    """
    Collect importable font families in first-seen order.

    For each font key the first non-empty value across ``sections`` (in
    priority order) is used; lower-priority sections never add a second
    family for the same key.
    """
    section_order = tuple(sections)
    families: list[str] = []
    for key in font_keys:
        value = next(
            (css_vars.section(s).get(key) for s in section_order if css_vars.section(s).get(key)),
            None,
        )
        if value is None:
            continue
        family = font_family(value)
        if family and family not in families:
            families.append(family)
    return families


def derive_font_imports(
    css_vars: ThemeVariableMap,
    font_keys: Iterable[str] = FONT_KEYS,
    sections: Iterable[str] = SECTIONS,
) -> list[str]:
    """Import directives for every family found by :func:`derive_font_families`."""
    return [font_import(f) for f in derive_font_families(css_vars, font_keys, sections)]
