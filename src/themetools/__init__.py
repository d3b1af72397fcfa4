"""
theme-tools - install and manage Tailwind CSS-variable themes.

Fetches shadcn-style theme definitions and patches them into an Inertia
(React or Vue) application's stylesheets and theme registry.
"""

from __future__ import annotations

from ._version import __version__
from .core.errors import (
    InputError,
    PartialApplyError,
    ProtectedThemeError,
    StructureParseError,
    ThemeNotFoundError,
    ThemeToolsError,
)

__all__ = [
    "__version__",
    "ThemeToolsError",
    "InputError",
    "StructureParseError",
    "ProtectedThemeError",
    "ThemeNotFoundError",
    "PartialApplyError",
]
