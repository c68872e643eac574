"""CLI commands for dutrim.

This package contains all subcommand implementations.
"""

from dutrim.cli.commands import config, tree

__all__ = ["config", "tree"]
