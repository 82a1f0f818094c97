"""Settings commands.

Shows the effective settings and writes a default settings file.
"""

from typing import Annotated

import typer
from rich.markup import escape

from tmpfiles.cli.types import require_settings
from tmpfiles.core.paths import get_settings_path
from tmpfiles.core.settings import Settings, SettingsError, save_settings
from tmpfiles.utils.formatting import console, print_error, print_success, print_warning

app = typer.Typer(
    help="Show or initialize settings.",
    no_args_is_help=True,
)


@app.command()
def show() -> None:
    """Show the effective settings."""
    path = get_settings_path()
    settings = require_settings()

    source = str(path) if path.exists() else f"{path} (not found, using defaults)"
    console.print(f"[header]Settings file:[/] {escape(source)}")
    console.print("[header]Configuration sources:[/]")
    for config_source in settings.config_sources:
        console.print(f"  [path]{escape(str(config_source))}[/]")
    console.print(f"[header]Include boot-only lines:[/] {settings.include_boot}")
    console.print(f"[header]Output format:[/] {settings.output_format}")


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing settings file."),
    ] = False,
) -> None:
    """Write a settings file with the default values."""
    path = get_settings_path()
    if path.exists() and not force:
        print_warning(f"Settings file already exists: {path}")
        console.print("[dim]Use --force to overwrite it.[/dim]")
        raise typer.Exit(code=1)

    try:
        saved = save_settings(Settings(), path)
    except SettingsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Settings written to {saved}")
