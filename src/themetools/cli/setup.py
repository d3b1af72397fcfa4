"""
CLI commands for theme tooling setup.

Commands:
- setup: Publish the bundled theme tooling into an application
- update: Refresh the theme switcher component
"""

from __future__ import annotations

import typer

from themetools.cli.common import get_config, handle_errors, print_build_hint, print_report
from themetools.cli_ui import (
    SelectOption,
    confirm,
    print_error,
    print_info,
    print_success,
    select_interactive,
)
from themetools.core.stubs import STACK_LABELS, STACKS, SetupMode, detect_stack, run_setup, run_update

_MODE_OPTIONS = [
    SelectOption(
        value=SetupMode.STARTER,
        label="Starter kit template",
        description="Includes the pre-built theme switcher component",
        badge="RECOMMENDED",
    ),
    SelectOption(
        value=SetupMode.STANDALONE,
        label="Stand-alone configuration",
        description="Hook/composable only, build your own UI",
    ),
]


def _stack_options() -> list[SelectOption[str]]:
    return [SelectOption(value=stack, label=STACK_LABELS[stack]) for stack in STACKS]


def _validate_stack(stack: str | None) -> None:
    if stack is not None and stack not in STACKS:
        print_error(f"Unknown stack '{stack}'. Expected one of: {', '.join(STACKS)}")
        raise typer.Exit(code=1)


def setup_command(
    ctx: typer.Context,
    mode: SetupMode = typer.Option(None, "--mode", "-m", help="starter or standalone"),
    stack: str = typer.Option(None, "--stack", "-s", help="react or vue"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite files that already exist"),
) -> None:
    """
    Set up theme tooling and starter kits.

    Publishes the theme registry, the starter themes and the colour theme
    hook (plus the switcher component for the starter kit), imports the
    starter themes in app.css and initialises the colour theme in the app
    entry file.
    """
    _validate_stack(stack)
    config = get_config(ctx)

    if mode is None:
        mode = select_interactive(_MODE_OPTIONS, title="How would you like to set up themes?")
        if mode is None:
            print_info("Setup cancelled.")
            return

    if stack is None:
        stack = select_interactive(_stack_options(), title="Which stack are you using?")
        if stack is None:
            print_info("Setup cancelled.")
            return

    if mode == SetupMode.STARTER:
        print_info(f"Installing the {STACK_LABELS[stack]} starter kit...")
    else:
        print_info(f"Setting up stand-alone theme configuration for {STACK_LABELS[stack]}...")

    with handle_errors():
        report = run_setup(config, stack, mode, overwrite=force)

    print_report(report, config)
    if mode == SetupMode.STARTER:
        print_success("Starter kit installed successfully.")
    else:
        print_success("Stand-alone configuration set up successfully.")
        print_info("You can now use the `useColorTheme` hook/composable to build your own UI.")
    print_build_hint()


def update_command(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", "-f", help="Force update without confirmation"),
    stack: str = typer.Option(None, "--stack", "-s", help="react or vue (detected when omitted)"),
) -> None:
    """Update the theme switcher component to the bundled version."""
    _validate_stack(stack)
    config = get_config(ctx)

    if not force and not confirm(
        "This will overwrite your theme personalization components. Do you wish to continue?",
        default=False,
    ):
        print_info("Update cancelled.")
        return

    stack = stack or detect_stack(config.resources)
    with handle_errors():
        report = run_update(config, stack)

    print_report(report, config)
    print_success(f"Updated the {STACK_LABELS[stack]} theme switcher.")
