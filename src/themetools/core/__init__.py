"""Core theme-tools functionality: rendering, patching, registry editing, installation."""

from .config import ThemeToolsConfig, load_config
from .errors import (
    ErrorContext,
    InputError,
    PartialApplyError,
    ProtectedThemeError,
    StructureParseError,
    StubError,
    ThemeNotFoundError,
    ThemeToolsError,
)
from .installer import ApplyReport, FileAction, ThemeInstaller, prepare_theme
from .models import ThemeDefinition, ThemeRecord, ThemeVariableMap
from .registry import ThemeRegistry

__all__ = [
    "ThemeToolsConfig",
    "load_config",
    "ThemeToolsError",
    "ErrorContext",
    "InputError",
    "StructureParseError",
    "ProtectedThemeError",
    "ThemeNotFoundError",
    "StubError",
    "PartialApplyError",
    "ApplyReport",
    "FileAction",
    "ThemeInstaller",
    "prepare_theme",
    "ThemeDefinition",
    "ThemeRecord",
    "ThemeVariableMap",
    "ThemeRegistry",
]
