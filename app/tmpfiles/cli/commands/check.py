"""Check command implementation.

Validates tmpfiles.d configuration without listing it.
"""

from pathlib import Path
from typing import Annotated

import typer

from tmpfiles.cli.display import print_line_errors, print_parse_summary
from tmpfiles.cli.types import require_config, require_settings, resolve_sources

app = typer.Typer(
    help="Validate configuration files.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def check_config(
    ctx: typer.Context,
    sources: Annotated[
        list[Path] | None,
        typer.Option(
            "--source",
            "-s",
            help="Configuration file or directory (repeatable).",
        ),
    ] = None,
) -> None:
    """Parse configuration files and report every invalid line.

    Exits with status 1 if any line fails to parse.
    """
    if ctx.invoked_subcommand is not None:
        return

    result = require_config(resolve_sources(sources, require_settings()))
    if not (ctx.obj or {}).get("quiet", False):
        print_parse_summary(result)

    if result.errors:
        print_line_errors(result.errors)
        raise typer.Exit(code=1)
