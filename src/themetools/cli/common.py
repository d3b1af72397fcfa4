"""Shared CLI helpers to reduce boilerplate across command modules."""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

import typer
from pydantic import ValidationError

from themetools.cli_ui import console, print_error, print_muted, print_success, print_warning
from themetools.core.config import ThemeToolsConfig, load_config
from themetools.core.errors import PartialApplyError, ThemeToolsError
from themetools.core.installer import ApplyReport, FileAction

logger = logging.getLogger(__name__)


@dataclass
class CliState:
    """Global options collected by the main callback."""

    resource_root: Path | None = None
    verbose: bool = False


def get_config(ctx: typer.Context) -> ThemeToolsConfig:
    """Load configuration for the working directory, applying global options.

    Exits with code 1 if a configuration file cannot be read.
    """
    state = ctx.obj if isinstance(ctx.obj, CliState) else CliState()
    try:
        return load_config(resource_root=state.resource_root)
    except (OSError, tomllib.TOMLDecodeError, ValidationError) as e:
        print_error(f"Invalid configuration: {e}")
        raise typer.Exit(code=1)


@contextmanager
def handle_errors() -> Iterator[None]:
    """Report theme-tools errors and exit with code 1.

    Unexpected exceptions propagate unchanged.
    """
    try:
        yield
    except PartialApplyError as e:
        print_error(e.message)
        if e.updated:
            print_warning("These files were already updated and were not rolled back:")
            for path in e.updated:
                console.print(f"  - {path}", markup=False, highlight=False)
        raise typer.Exit(code=1)
    except ThemeToolsError as e:
        logger.debug("Command failed", exc_info=True)
        print_error(str(e))
        raise typer.Exit(code=1)
    except OSError as e:
        print_error(f"File error: {e}")
        raise typer.Exit(code=1)


_ACTION_VERBS = {
    FileAction.CREATED: "Created",
    FileAction.UPDATED: "Updated",
    FileAction.DELETED: "Removed",
}


def _display_path(path: Path, config: ThemeToolsConfig) -> str:
    try:
        return str(path.relative_to(config.project_root))
    except ValueError:
        return str(path)


def print_report(report: ApplyReport, config: ThemeToolsConfig) -> None:
    """One line per touched file."""
    for change in report.changes:
        shown = _display_path(change.path, config)
        verb = _ACTION_VERBS.get(change.action)
        if verb is not None:
            print_success(f"{verb}: {shown}")
        elif change.action == FileAction.MISSING:
            print_warning(f"{change.detail or 'Not found'}: {shown}")
        else:
            print_muted(f"  - {change.detail or 'Unchanged'}: {shown}")


def print_build_hint(message: str = "to apply the styles") -> None:
    console.print()
    print_muted(f"Run `npm run dev` or `npm run build` {message}.")
