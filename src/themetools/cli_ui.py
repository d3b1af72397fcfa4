"""
Rich console helpers for the theme-tools CLI.

Status lines go to stdout except errors, which go to stderr. Prompts read
from stdin, so they work the same under a terminal and under CliRunner.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

from rich import box
from rich.console import Console
from rich.style import Style
from rich.table import Table
from rich.text import Text

console = Console()
err_console = Console(stderr=True)

T = TypeVar("T")

_CANCEL_WORDS = ("q", "quit", "cancel")


@dataclass
class SelectOption(Generic[T]):
    """One numbered choice in a selection menu."""

    value: T
    label: str
    description: str = ""
    badge: str = ""


STYLES = {
    "title": Style(color="bright_cyan", bold=True),
    "badge": Style(color="yellow", bold=True),
    "success": Style(color="green", bold=True),
    "error": Style(color="red", bold=True),
    "warning": Style(color="yellow"),
    "info": Style(color="cyan"),
    "muted": Style(color="bright_black"),
}


def print_success(message: str) -> None:
    console.print(Text(f"✓ {message}", style=STYLES["success"]))


def print_error(message: str) -> None:
    err_console.print(Text(f"✗ {message}", style=STYLES["error"]))


def print_warning(message: str) -> None:
    console.print(Text(f"⚠ {message}", style=STYLES["warning"]))


def print_info(message: str) -> None:
    console.print(Text(f"ℹ {message}", style=STYLES["info"]))


def print_muted(message: str) -> None:
    console.print(Text(message, style=STYLES["muted"]))


def _ask(message: str) -> str | None:
    """Read one stripped line; None on Ctrl+C or end of input."""
    try:
        return console.input(Text(message, style=STYLES["info"])).strip()
    except (KeyboardInterrupt, EOFError):
        console.print()
        return None


def _match_option(options: list[SelectOption[T]], choice: str) -> SelectOption[T] | None:
    """Resolve a number, an exact label, or a label prefix (case-insensitive)."""
    if choice.isdigit():
        index = int(choice) - 1
        return options[index] if 0 <= index < len(options) else None

    lowered = choice.lower()
    exact = [opt for opt in options if opt.label.lower() == lowered]
    if exact:
        return exact[0]
    prefixed = [opt for opt in options if opt.label.lower().startswith(lowered)]
    return prefixed[0] if prefixed else None


def select_interactive(options: list[SelectOption[T]], title: str = "Select an option") -> T | None:
    """
    Show a numbered menu and return the chosen value.

    Accepts the option number or its label. Returns None when there is
    nothing to choose from or the user cancels (empty input, ``q``, Ctrl+C).
    """
    if not options:
        return None

    console.print()
    console.print(Text(title, style=STYLES["title"]))

    table = Table(box=box.SIMPLE, show_header=False, padding=(0, 2))
    table.add_column("Num", style="cyan", width=4)
    table.add_column("Option")
    table.add_column("Description", style="bright_black")
    for number, opt in enumerate(options, 1):
        label = Text(opt.label)
        if opt.badge:
            label.append(f" [{opt.badge}]", style=STYLES["badge"])
        table.add_row(f"{number}.", label, opt.description)
    console.print(table)

    while True:
        choice = _ask("Enter number or name: ")
        if not choice or choice.lower() in _CANCEL_WORDS:
            return None
        selected = _match_option(options, choice)
        if selected is not None:
            return selected.value
        print_warning(f"Invalid choice. Enter 1-{len(options)} or an option name.")


def prompt_text(message: str, default: str = "") -> str:
    """Ask for a line of text; ``default`` on empty input or EOF."""
    suffix = f" [{default}]" if default else ""
    return _ask(f"{message}{suffix}: ") or default


def confirm(message: str, default: bool = True) -> bool:
    """Yes/no question. Ctrl+C or end of input counts as no."""
    suffix = " [Y/n] " if default else " [y/N] "
    response = _ask(message + suffix)
    if response is None:
        return False
    if not response:
        return default
    return response.lower() in ("y", "yes")


def create_table(*columns: str, title: str = "") -> Table:
    """A rounded table with bold cyan headers."""
    table = Table(box=box.ROUNDED, show_header=True, header_style="bold cyan", title=title or None)
    for column in columns:
        table.add_column(column)
    return table
