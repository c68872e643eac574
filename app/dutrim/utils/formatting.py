"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from dutrim.core.theme import get_theme

if TYPE_CHECKING:
    from dutrim.tree.models import Node

# Binary unit letters, largest first
_SIZE_UNITS: tuple[tuple[str, int], ...] = (
    ("P", 50),
    ("T", 40),
    ("G", 30),
    ("M", 20),
    ("K", 10),
)


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def format_size(size_bytes: int) -> str:
    """Format a byte count with a binary unit letter.

    The value is truncated, not rounded: 1536 bytes is "1K".
    Sizes up to and including 1024 bytes are shown in bytes.

    Args:
        size_bytes: Size in bytes.

    Returns:
        Compact size string such as "512B", "3M" or "1G".
    """
    for letter, shift in _SIZE_UNITS:
        if size_bytes > 1 << shift:
            return f"{size_bytes >> shift}{letter}"
    return f"{size_bytes}B"


def create_entry_table(title: str) -> Table:
    """Create a pre-configured table for listing tree entries.

    Args:
        title: Table title.

    Returns:
        Rich Table configured for entry display.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="header",
        border_style="border",
    )
    table.add_column("", width=1, justify="center")
    table.add_column("Name", no_wrap=True)
    table.add_column("Type", style="muted", width=9)
    table.add_column("Size", style="size", justify="right")
    table.add_column("Share", style="muted", justify="right")
    return table


def format_entry_row(node: Node, parent_size: int) -> tuple[str, str, str, str, str]:
    """Format a tree entry as a table row with proper styling.

    Marked entries get a filled circle and the marked color.

    Args:
        node: The entry to format.
        parent_size: Aggregate size of the listed directory, for the share column.

    Returns:
        Tuple of (marker, name, type, size, share) with Rich markup.
    """
    style = "marked" if node.is_marked else "directory" if node.is_directory else "file"
    marker = "[marked]●[/]" if node.is_marked else ""
    suffix = "/" if node.is_directory else ""
    kind = "directory" if node.is_directory else "file"
    share = f"{node.size / parent_size:.0%}" if parent_size else "-"
    name = f"[{style}]{escape(node.name)}{suffix}[/]"
    return (marker, name, kind, format_size(node.size), share)


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
