"""Cat-config command implementation.

Prints the raw contents of the configuration files that would be applied.
"""

import sys
from pathlib import Path
from typing import Annotated

import typer

from tmpfiles.cli.types import require_settings, resolve_sources
from tmpfiles.core.config_files import ConfigSourceError, cat_config, find_config_files
from tmpfiles.utils.formatting import print_error

app = typer.Typer(
    help="Print the configuration files to apply.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def cat_config_files(
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
    """Print every configuration file, in application order, byte for byte."""
    if ctx.invoked_subcommand is not None:
        return

    try:
        paths = find_config_files(resolve_sources(sources, require_settings()))
        cat_config(paths, sys.stdout.buffer)
    except ConfigSourceError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    sys.stdout.buffer.flush()
