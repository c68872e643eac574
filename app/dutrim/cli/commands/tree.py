"""Tree inspection and pruning commands.

Provides commands to index a directory and list its entries by size,
and to mark entries and remove them from disk.
"""

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from dutrim.cli.types import OutputFormat, require_config, require_index
from dutrim.tree import DeletionResult, Node, TreeOperator
from dutrim.utils.formatting import (
    console,
    create_entry_table,
    format_entry_row,
    format_size,
    print_error,
    print_info,
    print_success,
    print_warning,
)

app = typer.Typer(
    help="Index, inspect and prune directory trees.",
    invoke_without_command=True,
    no_args_is_help=True,
)


@app.command()
def show(
    ctx: typer.Context,
    path: Annotated[
        Path,
        typer.Argument(help="Directory to index."),
    ] = Path("."),
    at: Annotated[
        Path | None,
        typer.Option(
            "--at",
            "-a",
            help="Entry to list, relative to PATH or absolute. Defaults to PATH.",
        ),
    ] = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
    limit: Annotated[
        int | None,
        typer.Option(
            "--limit",
            "-l",
            min=1,
            help="Limit number of listed entries.",
        ),
    ] = None,
) -> None:
    """Index a directory and list its entries by size."""
    config = require_config()
    root = require_index(path, config, quiet=_is_quiet(ctx))

    node = root if at is None else root.find_node(_tree_path(root, at))
    if node is None:
        print_error(f"Not part of the indexed tree: {escape(str(at))}")
        raise typer.Exit(code=1)

    limit = limit or config.display.limit
    children = node.children[:limit] if limit else node.children

    if output_format == OutputFormat.JSON:
        _print_json(node, children)
        return

    if not node.is_directory:
        print_info(f"File of {format_size(node.size)}: {escape(str(node.path))}")
        return

    if not node.children:
        print_info(f"Empty directory: {escape(str(node.path))}")
        return

    table = create_entry_table(escape(str(node.path)))
    for child in children:
        table.add_row(*format_entry_row(child, node.size))
    console.print(table)

    console.print(
        f"\n[dim]{len(node.children)} entries ({format_size(node.size)} total)[/dim]"
    )
    if len(children) < len(node.children):
        console.print(
            f"[dim](showing {len(children)} of {len(node.children)}, limited to {limit})[/dim]"
        )


@app.command()
def prune(
    ctx: typer.Context,
    path: Annotated[
        Path,
        typer.Argument(help="Directory to index."),
    ],
    targets: Annotated[
        list[Path],
        typer.Argument(help="Entries to remove, relative to PATH or absolute."),
    ],
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", "-n", help="Show what would be removed."),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
) -> None:
    """Mark entries of a directory tree and remove them from disk."""
    config = require_config()
    dry_run = dry_run or config.delete.dry_run
    root = require_index(path, config, quiet=_is_quiet(ctx))

    for target in targets:
        tree_path = _tree_path(root, target)
        if tree_path == root.path:
            print_warning(f"Skipping the indexed root itself: {escape(str(target))}")
            continue
        node = root.find_node(tree_path)
        if node is None:
            print_warning(f"Not part of the indexed tree: {escape(str(target))}")
            continue
        node.mark(True)

    marked = list(root.iter_marked())
    if not marked:
        print_info("Nothing marked for removal.")
        return

    _print_deletion_plan(marked, dry_run)

    if not dry_run and not yes:
        confirmed = typer.confirm(
            "\nDo you REALLY want to remove marked files?",
            default=False,
        )
        if not confirmed:
            print_info("Aborted.")
            raise typer.Exit(code=0)

    results = TreeOperator(dry_run=dry_run).delete_marked(root)
    _print_deletion_results(results)

    if any(not r.success for r in results):
        raise typer.Exit(code=1)


# === Private helper functions ===


def _is_quiet(ctx: typer.Context) -> bool:
    """Read the global --quiet flag stored by the main callback."""
    return bool(ctx.obj and ctx.obj.get("quiet"))


def _tree_path(root: Node, path: Path) -> Path:
    """Translate a user-supplied path into a tree path under ``root``."""
    if path.is_absolute():
        return path
    return root.path / path


def _print_json(node: Node, children: list[Node]) -> None:
    """Display an entry and its listed children as JSON."""
    data = {
        "path": str(node.path),
        "is_directory": node.is_directory,
        "size_bytes": node.size,
        "children": [
            {
                "path": str(child.path),
                "name": child.name,
                "is_directory": child.is_directory,
                "size_bytes": child.size,
            }
            for child in children
        ],
    }
    console.print_json(json.dumps(data))


def _print_deletion_plan(marked: list[Node], dry_run: bool) -> None:
    """Display planned removals."""
    label = "Planned Removals (dry-run)" if dry_run else "Planned Removals"
    table = Table(title=label, show_lines=False)
    table.add_column("Path", style="marked")
    table.add_column("Type", width=9)
    table.add_column("Size", style="size", justify="right")

    for node in marked:
        kind = "directory" if node.is_directory else "file"
        table.add_row(escape(str(node.path)), kind, format_size(node.size))

    console.print(table)
    total = sum(node.size for node in marked)
    console.print(f"[dim]{len(marked)} entries ({format_size(total)} total)[/dim]")


def _print_deletion_results(results: list[DeletionResult]) -> None:
    """Display removal results."""
    table = Table(title="Removal Results", show_lines=False)
    table.add_column("Path", style="bold")
    table.add_column("Status", width=10)
    table.add_column("Details", style="dim")

    for r in results:
        if r.dry_run:
            status = "[info]dry-run[/]"
            detail = f"Would free {format_size(r.size)}"
        elif r.success:
            status = "[success]removed[/]"
            detail = format_size(r.size)
        else:
            status = "[error]failed[/]"
            detail = escape(r.error or "Unknown error")
        table.add_row(escape(r.path), status, detail)

    console.print(table)

    success_count = sum(1 for r in results if r.success)
    fail_count = sum(1 for r in results if not r.success and not r.dry_run)
    dry_count = sum(1 for r in results if r.dry_run)
    freed = sum(r.size for r in results if r.success)

    if dry_count:
        print_info(f"Dry-run: {dry_count} entries would be removed ({format_size(freed)}).")
    elif fail_count:
        print_warning(f"{success_count} removed, {fail_count} failed")
    else:
        print_success(f"All {success_count} entries removed ({format_size(freed)} freed).")
