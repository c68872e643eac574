"""Unit tests for console styles and user overrides."""

from pathlib import Path

import pytest
from dutrim.core.paths import get_user_theme_path
from dutrim.core.theme import TreeStyles, get_theme, load_styles
from pydantic import ValidationError


def _write_theme(content: str) -> Path:
    path = get_user_theme_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


class TestTreeStyles:
    """Tests for the TreeStyles model."""

    def test_rich_style_definitions_accepted(self) -> None:
        """Styles may combine attributes and colors."""
        styles = TreeStyles(marked="bold underline red on #000000")

        assert styles.marked == "bold underline red on #000000"

    def test_invalid_style_rejected(self) -> None:
        """Unparseable styles are rejected."""
        with pytest.raises(ValidationError, match="invalid style"):
            TreeStyles(size="#gggggg")

    def test_unknown_style_rejected(self) -> None:
        """Only the styles dutrim prints with can be set."""
        with pytest.raises(ValidationError):
            TreeStyles.model_validate({"package_manual": "red"})

    def test_theme_covers_console_markup(self) -> None:
        """Every style name used in console markup is defined."""
        theme = TreeStyles().to_rich_theme()

        for name in ("info", "warning", "error", "success", "dim", "header", "marked", "size"):
            assert name in theme.styles


class TestLoadStyles:
    """Tests for reading the user theme file."""

    def test_no_user_theme(self) -> None:
        """Without a theme file the defaults apply."""
        assert load_styles() == TreeStyles()

    def test_partial_override(self) -> None:
        """Overridden styles replace defaults; the rest stay."""
        _write_theme('[styles]\nmarked = "reverse red"\n')

        styles = load_styles()

        assert styles.marked == "reverse red"
        assert styles.directory == TreeStyles().directory

    def test_invalid_override_falls_back(self) -> None:
        """One bad style discards the whole override."""
        _write_theme('[styles]\nmarked = "reverse red"\nsize = "sparkly"\n')

        assert load_styles() == TreeStyles()

    def test_malformed_file_ignored(self, tmp_path: Path) -> None:
        """Broken TOML is ignored."""
        path = tmp_path / "theme.toml"
        path.write_text("[styles\n")

        assert load_styles(path) == TreeStyles()

    def test_styles_not_a_table(self, tmp_path: Path) -> None:
        """A non-table [styles] value is ignored."""
        path = tmp_path / "theme.toml"
        path.write_text('styles = "red"\n')

        assert load_styles(path) == TreeStyles()

    def test_theme_is_cached(self) -> None:
        """The console theme is built once."""
        assert get_theme() is get_theme()
