"""Console styles for dutrim output.

Every style has a built-in default. A ``theme.toml`` in the config
directory may override any of them in its ``[styles]`` table, using
Rich style definitions such as ``"bold #d44ebc"``.
"""

import logging
import tomllib
from functools import cache
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from rich.errors import StyleSyntaxError
from rich.style import Style
from rich.theme import Theme

from dutrim.core.paths import get_user_theme_path

logger = logging.getLogger(__name__)


class TreeStyles(BaseModel):
    """Rich style per kind of console output."""

    model_config = ConfigDict(extra="forbid")

    # Messages
    info: str = "#0ec1c8"
    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "bold #f53263"
    muted: str = "#b2bec3"

    # Entry tables
    header: str = "bold #69b9a1"
    border: str = "#29526d"
    directory: str = "bold #0e8ac8"
    file: str = "default"
    marked: str = "bold #d44ebc"
    size: str = "#faf870"

    @field_validator("*")
    @classmethod
    def check_style(cls, value: str) -> str:
        try:
            Style.parse(value)
        except StyleSyntaxError as e:
            raise ValueError(f"invalid style {value!r}: {e}") from None
        return value

    def to_rich_theme(self) -> Theme:
        """Build the Rich theme; ``dim`` follows the muted style."""
        return Theme({**self.model_dump(), "dim": self.muted})


def _read_user_styles(path: Path) -> dict[str, object]:
    """Read the ``[styles]`` table of a user theme file.

    A missing, unreadable or malformed file yields no overrides.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return {}

    styles = data.get("styles", {})
    if not isinstance(styles, dict):
        logger.warning("Ignoring theme file %s: [styles] is not a table", path)
        return {}
    return styles


def load_styles(path: Path | None = None) -> TreeStyles:
    """Load the default styles with the user's overrides applied.

    Args:
        path: Theme file to read. Defaults to ``theme.toml`` in the
            config directory.

    Returns:
        Validated styles. Invalid overrides fall back to the defaults.
    """
    path = path or get_user_theme_path()
    overrides = _read_user_styles(path)
    if not overrides:
        return TreeStyles()

    try:
        styles = TreeStyles.model_validate(overrides)
    except ValidationError as e:
        logger.warning("Invalid theme in %s, using defaults: %s", path, e)
        return TreeStyles()
    logger.debug("Loaded style overrides from %s", path)
    return styles


@cache
def get_theme() -> Theme:
    """Rich theme shared by the console instances, loaded once."""
    return load_styles().to_rich_theme()
