"""CLI commands for mini-tmpfiles.

This package contains all subcommand implementations.
"""

from tmpfiles.cli.commands import cat_config, check, parse, settings

__all__ = ["cat_config", "check", "parse", "settings"]
