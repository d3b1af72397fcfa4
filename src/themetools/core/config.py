"""
Configuration for theme-tools.

Configuration is loaded, in increasing priority, from defaults, the
``[tool.theme-tools]`` table of ``pyproject.toml`` or a standalone
``theme-tools.toml``, and ``THEME_TOOLS_*`` environment variables. CLI
options are applied last by the command layer.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from .models import DEFAULT_DESCRIPTION

logger = logging.getLogger(__name__)

CONFIG_FILE = "theme-tools.toml"
PYPROJECT_TABLE = "theme-tools"

ENV_PREFIX = "THEME_TOOLS_"


class ThemeToolsConfig(BaseModel):
    """Paths and policies for one application."""

    project_root: Path = Field(default_factory=Path.cwd)
    resource_root: Path = Path("resources")
    themes_dir: Path = Path("css/themes")
    app_css: Path = Path("css/app.css")
    registry: Path = Path("js/conf/themes.ts")
    protected_themes: list[str] = Field(default_factory=lambda: ["default"])
    registry_url: str = "https://tweakcn.com/r/themes/{name}.json"
    timeout: float = 30.0
    default_description: str = DEFAULT_DESCRIPTION

    @property
    def resources(self) -> Path:
        """Absolute resource root."""
        root = self.resource_root
        return root if root.is_absolute() else self.project_root / root

    def resource(self, relative: str | Path) -> Path:
        return self.resources / relative

    @property
    def themes_path(self) -> Path:
        return self.resource(self.themes_dir)

    @property
    def app_css_path(self) -> Path:
        return self.resource(self.app_css)

    @property
    def registry_path(self) -> Path:
        return self.resource(self.registry)

    def theme_css_path(self, theme_id: str) -> Path:
        return self.themes_path / f"{theme_id}.css"

    def is_protected(self, theme_id: str) -> bool:
        return theme_id in self.protected_themes


def _read_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def _file_settings(project_root: Path) -> dict[str, Any]:
    """Settings from theme-tools.toml, else pyproject.toml [tool.theme-tools]."""
    standalone = project_root / CONFIG_FILE
    if standalone.exists():
        logger.debug("Loading configuration from %s", standalone)
        return _read_toml(standalone)

    pyproject = project_root / "pyproject.toml"
    if pyproject.exists():
        section = _read_toml(pyproject).get("tool", {}).get(PYPROJECT_TABLE, {})
        if section:
            logger.debug("Loading configuration from %s [tool.%s]", pyproject, PYPROJECT_TABLE)
        return dict(section)

    return {}


def _env_settings(environ: dict[str, str]) -> dict[str, Any]:
    settings: dict[str, Any] = {}
    for name in ("resource_root", "registry_url", "timeout"):
        value = environ.get(ENV_PREFIX + name.upper())
        if value:
            settings[name] = value
    return settings


def load_config(
    project_root: Path | None = None,
    environ: dict[str, str] | None = None,
    **overrides: Any,
) -> ThemeToolsConfig:
    """
    Load configuration for a project.

    Args:
        project_root: Application root (defaults to the working directory)
        environ: Environment mapping (defaults to ``os.environ``)
        **overrides: Values from the command line; ``None`` values are ignored

    Returns:
        Validated ThemeToolsConfig
    """
    root = (project_root or Path.cwd()).resolve()
    data: dict[str, Any] = {}
    data.update(_file_settings(root))
    data.update(_env_settings(dict(os.environ) if environ is None else environ))
    data.update({k: v for k, v in overrides.items() if v is not None})
    data["project_root"] = root

    return ThemeToolsConfig.model_validate(data)
