"""Deletion of marked tree entries.

Removes the filesystem entries behind marked nodes, isolating
failures per entry so one failed removal never stops the others.
The in-memory tree is left untouched: removed nodes stay listed.
"""

import logging
import shutil
from dataclasses import dataclass

from dutrim.tree.models import Node

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DeletionResult:
    """Result of removing a single marked entry.

    Attributes:
        path: Absolute path that was operated on.
        size: Indexed size of the entry in bytes.
        success: Whether the removal completed successfully.
        error: Error message if the removal failed, None otherwise.
        dry_run: Whether this was a dry-run (nothing removed).
    """

    path: str
    size: int
    success: bool
    error: str | None = None
    dry_run: bool = False


class TreeOperator:
    """Removes marked entries of an indexed tree from disk.

    Attributes:
        _dry_run: If True, report removals without modifying the filesystem.
    """

    def __init__(self, dry_run: bool = False) -> None:
        """Initialize the TreeOperator.

        Args:
            dry_run: If True, report what would be removed without removing.
        """
        self._dry_run = dry_run

    def delete_marked(self, node: Node) -> list[DeletionResult]:
        """Remove every marked descendant of ``node`` from the filesystem.

        Children are visited in order. A marked child is removed as a
        whole (directories recursively) and not descended into; an
        unmarked child is searched for deeper marked entries. ``node``
        itself is never removed.

        Args:
            node: Root of the subtree to process.

        Returns:
            List of DeletionResult, one per removed (or attempted) entry.
        """
        return [self._delete_single(marked) for marked in node.iter_marked()]

    def _delete_single(self, node: Node) -> DeletionResult:
        """Remove the filesystem entry behind a single node.

        The entry kind is checked on disk at removal time:
        - Directories: shutil.rmtree
        - Files and symlinks (including symlinks to directories): Path.unlink

        Args:
            node: Marked node to remove.

        Returns:
            DeletionResult indicating success or failure.
        """
        target = node.path
        path = str(target)

        if self._dry_run:
            logger.info("Dry-run: would remove %s", target)
            return DeletionResult(path=path, size=node.size, success=True, dry_run=True)

        try:
            if target.is_dir() and not target.is_symlink():
                shutil.rmtree(target)
                logger.debug("Removed directory %s", target)
                return DeletionResult(path=path, size=node.size, success=True)

            if target.exists() or target.is_symlink():
                target.unlink()
                logger.debug("Removed file %s", target)
                return DeletionResult(path=path, size=node.size, success=True)

            logger.warning("Cannot remove %s: path does not exist", target)
            return DeletionResult(
                path=path,
                size=node.size,
                success=False,
                error=f"Path does not exist: {target}",
            )

        except OSError as e:
            kind = "directory" if node.is_directory else "file"
            logger.warning('Failed to remove %s "%s": %s', kind, target, e)
            return DeletionResult(path=path, size=node.size, success=False, error=str(e))


def delete_marked(node: Node, *, dry_run: bool = False) -> list[DeletionResult]:
    """Remove every marked descendant of ``node`` from the filesystem.

    Convenience wrapper around :meth:`TreeOperator.delete_marked`.
    """
    return TreeOperator(dry_run=dry_run).delete_marked(node)
