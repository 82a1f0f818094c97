"""CLI package for mini-tmpfiles.

This package contains the Typer application and all subcommands.
"""

from tmpfiles.cli.main import app

__all__ = ["app"]
