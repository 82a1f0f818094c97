"""Path management for mini-tmpfiles.

Provides the XDG-compliant location of the tool's own settings and theme
files, and the default location of tmpfiles.d configuration.

XDG defaults:
- Config: ~/.config/mini-tmpfiles/
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "mini-tmpfiles"

# Environment variable naming an alternate settings file
SETTINGS_ENV_VAR = "MINI_TMPFILES_CONFIG"

# Directory searched when no configuration source is given
DEFAULT_CONFIG_SOURCE = Path("/etc/tmpfiles.d")

# Only files with this suffix are picked up from source directories
CONFIG_FILE_SUFFIX = ".conf"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/mini-tmpfiles/ (or XDG_CONFIG_HOME/mini-tmpfiles/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_settings_path() -> Path:
    """Get the settings file path.

    The MINI_TMPFILES_CONFIG environment variable takes precedence.

    Returns:
        Path to ~/.config/mini-tmpfiles/config.toml or the override.
    """
    override = os.environ.get(SETTINGS_ENV_VAR)
    if override:
        return Path(override)
    return get_config_dir() / "config.toml"


def get_user_theme_path() -> Path:
    """Get the user theme configuration path.

    Returns:
        Path to ~/.config/mini-tmpfiles/theme.toml
    """
    return get_config_dir() / "theme.toml"
