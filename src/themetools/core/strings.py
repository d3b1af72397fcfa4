"""
String utility functions for theme names and identifiers.
"""

from __future__ import annotations

import re
import unicodedata
from pathlib import PurePosixPath
from urllib.parse import urlparse

_NON_SLUG = re.compile(r"[^a-z0-9]+")


def slugify(value: str, separator: str = "-") -> str:
    """
    Convert a human name into a theme id.

    Accents are transliterated to ASCII, everything that is not a letter or
    digit becomes ``separator`` and runs of separators collapse.

    Examples:
        >>> slugify("Vintage Paper")
        'vintage-paper'
        >>> slugify("  Café_Noir!! ")
        'cafe-noir'
    """
    normalized = unicodedata.normalize("NFKD", value)
    ascii_value = normalized.encode("ascii", "ignore").decode("ascii").lower()
    return _NON_SLUG.sub(separator, ascii_value).strip(separator)


def title_case(value: str) -> str:
    """
    Title-case a raw theme name, treating dashes and underscores as spaces.

    Examples:
        >>> title_case("vintage-paper")
        'Vintage Paper'
    """
    spaced = value.replace("-", " ").replace("_", " ")
    return " ".join(word.capitalize() for word in spaced.split())


def theme_name_from_url(url: str) -> str:
    """Derive a display name from the last path segment of a URL or path."""
    path = urlparse(url).path or url
    stem = PurePosixPath(path).name
    if stem.endswith(".json"):
        stem = stem[: -len(".json")]
    return title_case(stem)
