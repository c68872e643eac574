"""Shared types and utilities for CLI commands.

This module provides common enums and helper functions used across
multiple CLI command modules to avoid code duplication.
"""

from enum import Enum
from pathlib import Path

import typer
from rich.markup import escape

from dutrim.cli.progress import IndexReporter, index_with_progress
from dutrim.core.config import ConfigError, DutrimConfig, load_config
from dutrim.tree import Node
from dutrim.utils.formatting import print_error, print_warning


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


def require_config(config_path: Path | None = None) -> DutrimConfig:
    """Load configuration or exit with a helpful error message.

    Args:
        config_path: Optional custom config path.

    Returns:
        Loaded and validated DutrimConfig (defaults if no file exists).

    Raises:
        typer.Exit: If the config file exists but cannot be loaded.
    """
    try:
        return load_config(config_path)
    except ConfigError as e:
        print_error(escape(f"Failed to load config: {e}"))
        raise typer.Exit(code=1) from e


def require_index(path: Path, config: DutrimConfig, *, quiet: bool = False) -> Node:
    """Index ``path`` or exit if the root itself cannot be read.

    Args:
        path: Root directory to index.
        config: Loaded configuration.
        quiet: Suppress progress and per-failure messages.

    Returns:
        Root node of the indexed tree.

    Raises:
        typer.Exit: If the root path is unreadable.
    """
    try:
        root, reporter = index_with_progress(
            path,
            skip_paths=config.index.skip_paths,
            show_progress=config.display.show_progress,
            quiet=quiet,
        )
    except OSError as e:
        print_error(escape(f"Cannot index {path}: {e}"))
        raise typer.Exit(code=1) from e

    if not quiet:
        _warn_failures(reporter)
    return root


def _warn_failures(reporter: IndexReporter) -> None:
    if reporter.failures:
        print_warning(f"{reporter.failures} entries could not be indexed and are not listed.")
