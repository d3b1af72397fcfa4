"""Shared pytest fixtures for theme-tools tests."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import pytest

from themetools.core.config import ThemeToolsConfig
from themetools.core.stubs import STUBS_ROOT
from themetools.logging import LOGGER_NAME

APP_CSS = """@import 'tailwindcss';

@import 'tw-animate-css';

@source '../views';
@source '../../vendor/laravel/framework/src/Illuminate/Pagination/resources/views/*.blade.php';

@custom-variant dark (&:is(.dark *));

@theme inline {
    --color-background: var(--background);
    --color-sidebar: var(--sidebar-background);
}

:root {
    --background: oklch(1 0 0);
    --foreground: oklch(0.145 0 0);
}

@layer base {
    body {
        @apply bg-background text-foreground;
    }
}
"""


@pytest.fixture
def app_css_text() -> str:
    return APP_CSS


@pytest.fixture
def registry_text() -> str:
    """The registry published by ``setup`` (default, rose, ocean)."""
    return (STUBS_ROOT / "common" / "js" / "conf" / "themes.ts").read_text(encoding="utf-8")


@pytest.fixture
def resources(tmp_path: Path, registry_text: str) -> Path:
    """An application resource root with app.css and the stock registry."""
    root = tmp_path / "resources"
    (root / "css" / "themes").mkdir(parents=True)
    (root / "js" / "conf").mkdir(parents=True)
    (root / "css" / "app.css").write_text(APP_CSS, encoding="utf-8")
    (root / "js" / "conf" / "themes.ts").write_text(registry_text, encoding="utf-8")
    return root


@pytest.fixture
def config(tmp_path: Path, resources: Path) -> ThemeToolsConfig:
    return ThemeToolsConfig(project_root=tmp_path)


@pytest.fixture
def vintage_json() -> dict[str, Any]:
    return {
        "name": "vintage",
        "cssVars": {
            "light": {"primary": "oklch(0.5 0.2 250)"},
            "dark": {"primary": "oklch(0.7 0.2 250)"},
            "theme": {"font-sans": "Lora, serif"},
        },
    }


@pytest.fixture
def snapshot():
    """Every file under a directory with its bytes, keyed by relative path."""

    def take(root: Path) -> dict[str, bytes]:
        return {
            str(p.relative_to(root)): p.read_bytes() for p in sorted(root.rglob("*")) if p.is_file()
        }

    return take


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers the CLI callback attached to captured streams."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
