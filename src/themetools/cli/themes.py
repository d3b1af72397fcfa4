"""
CLI commands for installing and removing themes.

Commands:
- add: Fetch a theme and install it non-interactively
- import: Interactive variant of add
- remove: Remove an installed theme
- list: Show installed themes
"""

from __future__ import annotations

import typer

from themetools.cli.common import get_config, handle_errors, print_build_hint, print_report
from themetools.cli_ui import (
    SelectOption,
    confirm,
    console,
    create_table,
    print_error,
    print_info,
    print_success,
    print_warning,
    prompt_text,
    select_interactive,
)
from themetools.core.config import ThemeToolsConfig
from themetools.core.fetch import load_definition, resolve_source
from themetools.core.installer import PreparedTheme, ThemeInstaller, prepare_theme

EXAMPLE_SOURCE = "https://tweakcn.com/r/themes/vintage-paper.json"


def _prepare(
    config: ThemeToolsConfig,
    source: str,
    name: str | None,
    description: str | None,
) -> PreparedTheme:
    resolved = resolve_source(source, config.registry_url, base_dir=config.project_root)
    print_info(f"Fetching theme from {resolved.location}...")
    definition = load_definition(resolved, timeout=config.timeout)
    return prepare_theme(
        definition,
        resolved.default_name,
        name=name,
        description=description or config.default_description,
    )


def add_command(
    ctx: typer.Context,
    source: str = typer.Argument(..., help="Theme JSON URL, local file, or registry name"),
    name: str = typer.Option(None, "--name", "-n", help="Override the theme name"),
    description: str = typer.Option(None, "--description", "-d", help="Custom description for the theme"),
    force: bool = typer.Option(False, "--force", "-f", help="Regenerate an existing theme"),
) -> None:
    """
    Install a theme from a shadcn theme JSON definition.

    Writes css/themes/{id}.css, imports it from css/app.css and registers it
    in js/conf/themes.ts. Running it again for the same theme changes nothing.
    """
    config = get_config(ctx)
    installer = ThemeInstaller(config)

    with handle_errors():
        theme = _prepare(config, source, name, description)
        print_info(f"Processing theme: {theme.display_name} ({theme.theme_id})")

        if installer.css_exists(theme.theme_id) and not force:
            print_warning(f"Theme '{theme.theme_id}' already exists; use --force to regenerate it.")

        report = installer.install(theme, replace=force)

    print_report(report, config)
    if report.changed:
        print_success(f"Theme '{theme.display_name}' installed successfully!")
    else:
        print_info(f"Theme '{theme.theme_id}' is already installed.")


def import_command(
    ctx: typer.Context,
    source: str = typer.Argument(None, help=f"Theme JSON URL (e.g. {EXAMPLE_SOURCE})"),
    name: str = typer.Option(None, "--name", "-n", help="Override the theme name"),
    description: str = typer.Option(None, "--description", "-d", help="Custom description for the theme"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing theme without asking"),
) -> None:
    """
    Import a theme interactively.

    Asks for the source when it is not given and confirms before
    overwriting a theme that already exists.
    """
    config = get_config(ctx)
    installer = ThemeInstaller(config)

    if not source:
        source = prompt_text("Enter the theme JSON URL")
        if not source:
            print_error("A URL is required to import a theme.")
            raise typer.Exit(code=1)

    with handle_errors():
        theme = _prepare(config, source, name, description)

    replace = False
    if installer.is_installed(theme.theme_id):
        if not force and not confirm(f"Theme '{theme.theme_id}' already exists. Overwrite?", default=False):
            print_info("Import cancelled.")
            return
        replace = True

    print_info(f"Importing theme: {theme.display_name} (id: {theme.theme_id})")
    with handle_errors():
        report = installer.install(theme, replace=replace)

    print_report(report, config)
    print_success("Theme imported successfully!")
    print_build_hint("to apply the theme")


def remove_command(
    ctx: typer.Context,
    theme: str = typer.Argument(None, help="The theme id to remove (e.g. catppuccin)"),
    list_themes: bool = typer.Option(False, "--list", "-l", help="List all available themes"),
    force: bool = typer.Option(False, "--force", "-f", help="Remove without confirmation"),
) -> None:
    """
    Remove a theme from the application.

    Deletes the theme's CSS file, its app.css import and its registry entry.
    Protected themes (``default``) cannot be removed.
    """
    config = get_config(ctx)
    installer = ThemeInstaller(config)

    if list_themes:
        _print_theme_ids(installer)
        return

    if not theme:
        removable = [t for t in installer.available_themes() if not config.is_protected(t)]
        if not removable:
            print_error("No themes available to remove.")
            raise typer.Exit(code=1)
        theme = select_interactive(
            [SelectOption(value=t, label=t) for t in removable],
            title="Which theme would you like to remove?",
        )
        if theme is None:
            print_info("Removal cancelled.")
            return

    with handle_errors():
        # Protected and unknown themes fail before any prompt
        installer.check_removable(theme)

        if not force and not confirm(f"Are you sure you want to remove the '{theme}' theme?"):
            print_info("Removal cancelled.")
            return

        print_info(f"Removing theme: {theme}")
        report = installer.remove(theme)

    print_report(report, config)
    print_success("Theme removed successfully!")
    print_build_hint("to apply the changes")


def _print_theme_ids(installer: ThemeInstaller) -> None:
    themes = installer.available_themes()
    custom = [t for t in themes if not installer.config.is_protected(t)]
    if not custom:
        print_info("No custom themes installed.")
        return

    print_info("Available themes:")
    for theme_id in themes:
        suffix = " (protected)" if installer.config.is_protected(theme_id) else ""
        console.print(f"  - {theme_id}{suffix}", markup=False, highlight=False)


def list_command(ctx: typer.Context) -> None:
    """Show installed themes with their registry metadata."""
    config = get_config(ctx)
    installer = ThemeInstaller(config)

    with handle_errors():
        registry = installer.load_registry()

    entries = {entry.id: entry for entry in registry.entries if entry.id} if registry else {}
    theme_ids = sorted(set(installer.available_themes()) | set(entries))

    table = create_table("ID", "Name", "Font", "Primary", "CSS", "Status")
    for theme_id in theme_ids:
        entry = entries.get(theme_id)
        has_css = installer.css_exists(theme_id)
        if config.is_protected(theme_id):
            status = "protected"
        elif entry is None:
            status = "not registered"
        elif not has_css:
            status = "missing CSS"
        else:
            status = "installed"
        table.add_row(
            theme_id,
            (entry.field("name") if entry else None) or "-",
            (entry.field("font") if entry else None) or "-",
            (entry.field("primary") if entry else None) or "-",
            "yes" if has_css else "no",
            status,
        )

    console.print(table)
