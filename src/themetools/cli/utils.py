"""
theme-tools CLI utilities.

Shared utility functions used across CLI modules.
"""

import platform
from pathlib import Path

import typer

from themetools._version import get_version


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        python_version = platform.python_version()
        python_impl = platform.python_implementation()
        install_location = Path(__file__).parent.parent

        typer.echo(f"theme-tools {get_version()}")
        typer.echo("")
        typer.echo("Environment:")
        typer.echo(f"  Python:        {python_impl} {python_version}")
        typer.echo(f"  Platform:      {platform.system()} {platform.release()}")
        typer.echo(f"  Location:      {install_location}")

        raise typer.Exit()
