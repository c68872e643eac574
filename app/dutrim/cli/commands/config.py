"""Configuration commands.

Shows the effective configuration and writes a default config file.
"""

from typing import Annotated

import tomli_w
import typer
from rich.markup import escape

from dutrim.cli.types import require_config
from dutrim.core.config import ConfigError, DutrimConfig, save_config
from dutrim.core.paths import get_config_path
from dutrim.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show and initialize configuration.",
    invoke_without_command=True,
    no_args_is_help=True,
)


@app.command()
def show() -> None:
    """Show the effective configuration."""
    path = get_config_path()
    config = require_config(path)

    source = str(path) if path.exists() else f"{path} (not found, using defaults)"
    console.print(f"[dim]# {escape(source)}[/dim]", soft_wrap=True)
    console.print(tomli_w.dumps(config.model_dump(exclude_none=True)), markup=False)


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a config file with default settings."""
    path = get_config_path()
    if path.exists() and not force:
        print_info(f"Config already exists: {escape(str(path))} (use --force to overwrite)")
        raise typer.Exit(code=0)

    try:
        saved = save_config(DutrimConfig(), path)
    except ConfigError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    print_success(f"Config written to {escape(str(saved))}")
