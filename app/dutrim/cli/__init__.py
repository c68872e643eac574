"""CLI package for dutrim.

This package contains the Typer application and all subcommands.
"""

from dutrim.cli.main import app

__all__ = ["app"]
