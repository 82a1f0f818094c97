"""Color theme for mini-tmpfiles output.

The bundled data/theme.toml defines every color. A user theme.toml in the
config directory may override any subset of them. Colors are validated as
hex codes and turned into Rich styles named after what they highlight in a
parsed line (action, path, specifier, ...).
"""

import logging
import re
import tomllib
from importlib import resources
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from rich.theme import Theme

from tmpfiles.core.paths import get_user_theme_path

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})")

# Attributes added on top of the plain color for some styles
_STYLE_ATTRIBUTES: dict[str, str] = {
    "error": "bold",
    "action": "bold",
    "specifier": "bold",
}


class ThemeColors(BaseModel):
    """Hex colors for each kind of output.

    Attributes:
        text: Plain text.
        muted: Placeholders such as "-" for omitted fields.
        header: Table headers and labels.
        border: Table borders.
        success: Success messages.
        warning: Warnings.
        error: Errors.
        info: Informational messages.
        action: The action of a parsed line.
        path: Literal path text.
        specifier: Unresolved %-specifiers inside a path.
        boot: Lines that only apply during boot.
        location: file:line:column of a parse error.
    """

    model_config = ConfigDict(extra="forbid")

    text: str = "#ffffff"
    muted: str = "#b2bec3"
    header: str = "#69B9A1"
    border: str = "#29526d"
    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "#f53263"
    info: str = "#0ec1c8"
    action: str = "#c1ff62"
    path: str = "#0e8ac8"
    specifier: str = "#d44ebc"
    boot: str = "#faf870"
    location: str = "#226666"

    @field_validator("*", mode="before")
    @classmethod
    def check_hex_color(cls, v: object, info: Any) -> str:
        """Accept only #RGB or #RRGGBB strings."""
        if not isinstance(v, str):
            msg = f"{info.field_name}: color must be a string"
            raise ValueError(msg)
        color = v.strip()
        if not color.startswith("#"):
            msg = f"{info.field_name}: color must start with '#'"
            raise ValueError(msg)
        if not _HEX_COLOR.fullmatch(color):
            msg = f"{info.field_name}: invalid hex color '{color}'"
            raise ValueError(msg)
        return color

    def to_styles(self) -> dict[str, str]:
        """Map style names to Rich style definitions."""
        styles = {
            name: f"{_STYLE_ATTRIBUTES[name]} {color}" if name in _STYLE_ATTRIBUTES else color
            for name, color in self.model_dump().items()
        }
        styles["bold_header"] = f"bold {self.header}"
        styles["dim"] = self.muted
        return styles


def get_bundled_theme_path() -> Path:
    """Path of the theme shipped with the package."""
    return Path(str(resources.files("tmpfiles.data").joinpath("theme.toml")))


def _load_toml_colors(path: Path) -> dict[str, str] | None:
    """Read the [colors] table of a theme file.

    Returns:
        String-valued colors, or None if the file is missing or unusable.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return None
    except (tomllib.TOMLDecodeError, OSError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return None

    colors = data.get("colors", {})
    if not isinstance(colors, dict):
        logger.warning("Ignoring theme file %s: [colors] is not a table", path)
        return None
    return {key: value for key, value in colors.items() if isinstance(value, str)}


def load_theme() -> ThemeColors:
    """Load the bundled colors, overlaid with the user theme if present.

    An invalid color anywhere discards the overrides and falls back to the
    defaults.
    """
    colors = _load_toml_colors(get_bundled_theme_path())
    if colors is None:
        logger.error("Bundled theme is missing or unreadable")
        colors = {}

    user_path = get_user_theme_path()
    overrides = _load_toml_colors(user_path)
    if overrides is not None:
        logger.debug("Applying theme overrides from %s", user_path)
        colors = {**colors, **overrides}

    try:
        return ThemeColors(**colors)
    except ValidationError as e:
        logger.warning("Invalid theme colors, using defaults: %s", e)
        return ThemeColors()


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Build a Rich theme from colors, loading them if not given."""
    return Theme((colors or load_theme()).to_styles())


_cached_theme: Theme | None = None


def get_theme() -> Theme:
    """Return the Rich theme, loading it on first use."""
    global _cached_theme
    if _cached_theme is None:
        _cached_theme = get_rich_theme()
    return _cached_theme
