"""User configuration for dutrim.

This module provides the configuration model and I/O functions for
indexing, display and deletion defaults.

Configuration is stored in ~/.config/dutrim/config.toml. A missing
file is not an error: the defaults apply.
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from dutrim.core.paths import get_config_path
from dutrim.tree.indexer import SPECIAL_PATHS

logger = logging.getLogger(__name__)


class IndexSettings(BaseModel):
    """Settings for the directory indexer.

    Attributes:
        skip_paths: Path prefixes that are never traversed.
    """

    model_config = ConfigDict(extra="forbid")

    skip_paths: list[str] = Field(
        default_factory=lambda: list(SPECIAL_PATHS),
        description="Path prefixes represented as empty directories",
    )


class DisplaySettings(BaseModel):
    """Settings for CLI output.

    Attributes:
        show_progress: Show a progress bar while indexing.
        limit: Maximum number of rows listed (None = no limit).
    """

    model_config = ConfigDict(extra="forbid")

    show_progress: bool = True
    limit: Annotated[
        int | None,
        Field(ge=1, description="Maximum number of listed entries"),
    ] = None


class DeleteSettings(BaseModel):
    """Settings for pruning.

    Attributes:
        dry_run: Report removals without touching the filesystem by default.
    """

    model_config = ConfigDict(extra="forbid")

    dry_run: bool = False


class DutrimConfig(BaseModel):
    """Top-level dutrim configuration."""

    model_config = ConfigDict(extra="forbid")

    index: IndexSettings = Field(default_factory=IndexSettings)
    display: DisplaySettings = Field(default_factory=DisplaySettings)
    delete: DeleteSettings = Field(default_factory=DeleteSettings)


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None) -> DutrimConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated DutrimConfig, or the defaults if the file does not exist.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the file cannot be read or doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        logger.debug("No config at %s, using defaults", config_path)
        return DutrimConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return DutrimConfig.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def save_config(config: DutrimConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The DutrimConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    data = config.model_dump(exclude_none=True)

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        # os.replace() is atomic on POSIX
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path
