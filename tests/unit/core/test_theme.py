"""Unit tests for theme module.

Tests for theme loading, validation, and Rich theme generation.
"""

# pyright: reportPrivateUsage=false

from pathlib import Path
from unittest.mock import patch

import pytest
import tmpfiles.core.theme as theme_module
from rich.theme import Theme
from tmpfiles.core.theme import (
    ThemeColors,
    _load_toml_colors,
    get_bundled_theme_path,
    get_rich_theme,
    get_theme,
    load_theme,
)


class TestThemeColors:
    """Tests for ThemeColors Pydantic model."""

    def test_default_values(self) -> None:
        """ThemeColors has defaults for the line fields."""
        colors = ThemeColors()
        assert colors.path == "#0e8ac8"
        assert colors.specifier == "#d44ebc"
        assert colors.error == "#f53263"

    def test_short_hex_colors(self) -> None:
        """ThemeColors accepts #RGB codes."""
        assert ThemeColors(location="#abc").location == "#abc"

    def test_invalid_hex_no_hash(self) -> None:
        """ThemeColors rejects colors without # prefix."""
        with pytest.raises(ValueError, match="must start with '#'"):
            ThemeColors(boot="ffffff")

    def test_invalid_hex_chars(self) -> None:
        """ThemeColors rejects invalid hex characters."""
        with pytest.raises(ValueError, match="invalid hex color"):
            ThemeColors(action="#gggggg")

    def test_non_string_rejected(self) -> None:
        """ThemeColors rejects non-string values."""
        with pytest.raises(ValueError, match="must be a string"):
            ThemeColors(path=123)  # type: ignore[arg-type]

    def test_extra_fields_forbidden(self) -> None:
        """ThemeColors rejects unknown fields."""
        with pytest.raises(ValueError):
            ThemeColors(package_manual="#ffffff")  # type: ignore[call-arg]


class TestLoadTomlColors:
    """Tests for _load_toml_colors internal function."""

    def test_bundled_theme_has_every_color(self) -> None:
        """The bundled theme defines every field of ThemeColors."""
        result = _load_toml_colors(Path(str(get_bundled_theme_path())))

        assert result is not None
        assert set(result) == set(ThemeColors.model_fields)

    def test_returns_none_for_missing_file(self, tmp_path: Path) -> None:
        """Returns None when file doesn't exist."""
        assert _load_toml_colors(tmp_path / "nonexistent.toml") is None

    def test_ignores_non_string_values(self, tmp_path: Path) -> None:
        """Only string color values are returned."""
        theme_file = tmp_path / "theme.toml"
        theme_file.write_text('[colors]\npath = "#000000"\nboot = 5\n')

        assert _load_toml_colors(theme_file) == {"path": "#000000"}


class TestLoadTheme:
    """Tests for load_theme function."""

    def test_user_theme_overrides_bundled(self, tmp_path: Path) -> None:
        """User theme overrides bundled theme values."""
        user_theme = tmp_path / "theme.toml"
        user_theme.write_text('[colors]\nspecifier = "#ff0000"\n')

        with patch("tmpfiles.core.theme.get_user_theme_path", return_value=user_theme):
            colors = load_theme()

        assert colors.specifier == "#ff0000"
        assert colors.path == "#0e8ac8"

    def test_invalid_user_color_falls_back_to_defaults(self, tmp_path: Path) -> None:
        """An invalid user color is ignored as a whole."""
        user_theme = tmp_path / "theme.toml"
        user_theme.write_text('[colors]\nboot = "yellow"\n')

        with patch("tmpfiles.core.theme.get_user_theme_path", return_value=user_theme):
            colors = load_theme()

        assert colors == ThemeColors()


class TestGetRichTheme:
    """Tests for get_rich_theme function."""

    def test_includes_line_styles(self) -> None:
        """Theme includes styles used for parsed lines."""
        theme = get_rich_theme(ThemeColors())

        for name in ("action", "path", "specifier", "boot", "location", "bold_header", "dim"):
            assert name in theme.styles


class TestGetTheme:
    """Tests for get_theme caching function."""

    def test_caches_theme(self) -> None:
        """get_theme returns cached instance on subsequent calls."""
        theme_module._cached_theme = None

        assert get_theme() is get_theme()
        assert isinstance(get_theme(), Theme)

