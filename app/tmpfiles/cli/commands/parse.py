"""Parse command implementation.

Lists the parsed lines of tmpfiles.d configuration.
"""

import json
from pathlib import Path
from typing import Annotated

import typer

from tmpfiles.cli.display import create_lines_table, print_line_errors, print_parse_summary
from tmpfiles.cli.types import (
    OutputFormat,
    require_config,
    require_settings,
    resolve_sources,
)
from tmpfiles.parser import Line
from tmpfiles.utils.formatting import console, print_info

app = typer.Typer(
    help="Parse configuration and list its lines.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def parse_config(
    ctx: typer.Context,
    sources: Annotated[
        list[Path] | None,
        typer.Option(
            "--source",
            "-s",
            help="Configuration file or directory (repeatable).",
        ),
    ] = None,
    boot: Annotated[
        bool | None,
        typer.Option(
            "--boot/--no-boot",
            help="Include lines that only apply during boot.",
        ),
    ] = None,
    output_format: Annotated[
        OutputFormat | None,
        typer.Option(
            "--format",
            "-f",
            help="Output format: table or json.",
            case_sensitive=False,
        ),
    ] = None,
) -> None:
    """Parse configuration files and display the resulting lines.

    Lines that fail to parse are reported with their location; the
    command exits with status 1 if any line failed.

    Examples:
        mini-tmpfiles parse                          # Default sources
        mini-tmpfiles parse -s /etc/tmpfiles.d       # One directory
        mini-tmpfiles parse -s foo.conf --boot       # Include boot-only lines
        mini-tmpfiles parse --format json            # Output as JSON
    """
    if ctx.invoked_subcommand is not None:
        return

    settings = require_settings()
    include_boot = settings.include_boot if boot is None else boot
    fmt = OutputFormat(settings.output_format) if output_format is None else output_format

    result = require_config(resolve_sources(sources, settings))
    lines = [line for line in result.lines if include_boot or not line.is_boot_only]

    if fmt == OutputFormat.JSON:
        _print_json(lines)
    else:
        if lines:
            console.print(create_lines_table(lines))
        else:
            print_info("No configuration lines found.")
        hidden = len(result.lines) - len(lines)
        if hidden:
            console.print(f"[dim]{hidden} boot-only line(s) hidden, use --boot to show[/dim]")
        if not (ctx.obj or {}).get("quiet", False):
            print_parse_summary(result)

    if result.errors:
        print_line_errors(result.errors)
        raise typer.Exit(code=1)


def _print_json(lines: list[Line]) -> None:
    """Display parsed lines as JSON."""
    console.print_json(json.dumps([line.to_dict() for line in lines]))
