"""Tool settings.

This module provides the settings model and I/O functions for
mini-tmpfiles itself (not for the tmpfiles.d configuration it parses).

Settings are stored in ~/.config/mini-tmpfiles/config.toml
"""

import logging
import tomllib
from pathlib import Path
from typing import Annotated, Literal

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from tmpfiles.core.paths import DEFAULT_CONFIG_SOURCE, get_settings_path

logger = logging.getLogger(__name__)

# Output format type alias
OutputFormatType = Literal["table", "json"]


class Settings(BaseModel):
    """Settings for mini-tmpfiles.

    Attributes:
        config_sources: Files or directories to read when none are given.
        include_boot: Also list lines that only apply during boot.
        output_format: Default output format for listing parsed lines.
    """

    model_config = ConfigDict(extra="forbid")

    config_sources: Annotated[
        list[Path],
        Field(min_length=1, description="Configuration files or directories"),
    ] = [DEFAULT_CONFIG_SOURCE]
    include_boot: Annotated[
        bool,
        Field(description="Include boot-only lines"),
    ] = False
    output_format: Annotated[
        OutputFormatType,
        Field(description="Default output format"),
    ] = "table"


class SettingsError(Exception):
    """Base exception for settings errors."""


class SettingsParseError(SettingsError):
    """Raised when the settings file cannot be parsed."""


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from a TOML file.

    A missing file is not an error; the defaults are returned instead.

    Args:
        path: Path to the settings file. If None, uses the default path.

    Returns:
        Validated Settings object.

    Raises:
        SettingsParseError: If the TOML syntax is invalid.
        SettingsError: If the file cannot be read or the content is invalid.
    """
    settings_path = path or get_settings_path()

    if not settings_path.exists():
        logger.debug("No settings file at %s, using defaults", settings_path)
        return Settings()

    try:
        with open(settings_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise SettingsParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise SettingsError(f"Failed to read settings: {e}") from e

    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        raise SettingsError(f"Invalid settings content: {e}") from e


def save_settings(settings: Settings, path: Path | None = None) -> Path:
    """Save settings to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        settings: The Settings object to save.
        path: Path to save the settings. If None, uses the default path.

    Returns:
        Path where the settings were saved.

    Raises:
        SettingsError: If the file cannot be written.
    """
    import os
    from tempfile import NamedTemporaryFile

    settings_path = path or get_settings_path()

    data = _settings_to_dict(settings)

    tmp_path: Path | None = None
    try:
        settings_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=settings_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(settings_path))
    except OSError as e:
        # Cleanup temp file on failure
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise SettingsError(f"Failed to write settings: {e}") from e

    logger.debug("Saved settings to %s", settings_path)
    return settings_path


def _settings_to_dict(settings: Settings) -> dict[str, object]:
    """Convert Settings to a dictionary for TOML serialization.

    Always includes the configuration sources; other values only when
    they differ from the defaults.

    Args:
        settings: The Settings to convert.

    Returns:
        Dictionary ready for TOML serialization.
    """
    result: dict[str, object] = {
        "config_sources": [str(source) for source in settings.config_sources],
    }

    if settings.include_boot:
        result["include_boot"] = settings.include_boot

    if settings.output_format != "table":
        result["output_format"] = settings.output_format

    return result
