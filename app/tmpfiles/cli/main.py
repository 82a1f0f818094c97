"""mini-tmpfiles command line entry point.

Sets up logging from the global flags and registers the subcommands.
"""

import logging
from typing import Annotated

import typer

from tmpfiles import __version__
from tmpfiles.cli.commands import cat_config, check, parse, settings

app = typer.Typer(
    name="mini-tmpfiles",
    help="Parser and checker for tmpfiles.d configuration.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"mini-tmpfiles version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr, at DEBUG level when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        force=True,
    )


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=_print_version,
            is_eager=True,
            help="Print the version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log debug details to stderr."),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Only print results and errors."),
    ] = False,
) -> None:
    """mini-tmpfiles - Parse and check tmpfiles.d configuration.

    Reads file lifecycle configuration lines (create, clean up, remove,
    symlink, ...) and reports exactly where any line is malformed.
    """
    # -q wins over -v
    configure_logging(verbose and not quiet)
    ctx.obj = {"verbose": verbose, "quiet": quiet}


for command, name in (
    (parse, "parse"),
    (check, "check"),
    (cat_config, "cat-config"),
    (settings, "settings"),
):
    app.add_typer(command.app, name=name)


if __name__ == "__main__":
    app()
