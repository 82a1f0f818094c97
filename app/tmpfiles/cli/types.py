"""Shared types and utilities for CLI commands.

This module provides common enums and helper functions used across
multiple CLI command modules to avoid code duplication.
"""

from enum import Enum
from pathlib import Path

import typer

from tmpfiles.core.config_files import ConfigParseResult, ConfigSourceError, load_config
from tmpfiles.core.settings import Settings, SettingsError, load_settings
from tmpfiles.utils.formatting import print_error


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


def require_settings() -> Settings:
    """Load settings or exit with a helpful error message.

    Returns:
        Loaded Settings (defaults if no settings file exists).

    Raises:
        typer.Exit: If the settings file is invalid.
    """
    try:
        return load_settings()
    except SettingsError as e:
        print_error(f"Failed to load settings: {e}")
        raise typer.Exit(code=1) from e


def resolve_sources(sources: list[Path] | None, settings: Settings) -> list[Path]:
    """Pick the configuration sources to read.

    Args:
        sources: Sources given on the command line, if any.
        settings: Loaded settings providing the defaults.

    Returns:
        Explicit sources if given, otherwise the configured ones.
    """
    if sources:
        return sources
    return list(settings.config_sources)


def require_config(sources: list[Path]) -> ConfigParseResult:
    """Load configuration or exit with an error message.

    Per-line parse errors are part of the result; only unreadable sources
    abort.

    Args:
        sources: Configuration files or directories.

    Returns:
        Combined parse result.

    Raises:
        typer.Exit: If a source cannot be read.
    """
    try:
        return load_config(sources)
    except ConfigSourceError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
