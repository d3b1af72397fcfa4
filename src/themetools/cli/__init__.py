"""
theme-tools CLI package.

This package contains the CLI components:

- themes.py: add, import, remove and list commands
- setup.py: setup and update commands
- common.py: configuration loading, error reporting, report printing
- utils.py: version information
"""

from __future__ import annotations

import sys
from pathlib import Path

import typer

from themetools.cli.common import CliState
from themetools.cli.utils import version_callback
from themetools.logging import resolve_level, setup_logging

# =============================================================================
# Main Application
# =============================================================================

app = typer.Typer(
    help="""theme-tools - Tailwind CSS-variable themes for Inertia apps

Command Types:
  • Themes: add, import, remove, list
    → Install shadcn theme definitions into resources/

  • Tooling: setup, update
    → Publish the theme registry, hook and switcher component
""",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show diagnostic logging"),
    resource_root: Path = typer.Option(  # noqa: B008
        None,
        "--resource-root",
        "-r",
        help="Application resource directory (default: resources)",
    ),
) -> None:
    """theme-tools main callback for global options."""
    setup_logging(resolve_level(verbose))
    ctx.obj = CliState(resource_root=resource_root, verbose=verbose)


# =============================================================================
# Theme Commands (imported from cli.themes)
# =============================================================================
from themetools.cli.themes import (  # noqa: E402
    add_command,
    import_command,
    list_command,
    remove_command,
)

app.command(name="add")(add_command)
app.command(name="import")(import_command)
app.command(name="remove")(remove_command)
app.command(name="list")(list_command)


# =============================================================================
# Tooling Commands (imported from cli.setup)
# =============================================================================
from themetools.cli.setup import setup_command, update_command  # noqa: E402

app.command(name="setup")(setup_command)
app.command(name="update")(update_command)


def main(argv: list[str] | None = None) -> None:
    app(args=argv, standalone_mode=True)


if __name__ == "__main__":
    main(sys.argv[1:])


__all__ = ["app", "main"]
