"""Indexing progress and failure reporting for CLI commands.

Implements the indexer hooks: failures are printed to the error
console and counted, indexed bytes drive a Rich progress bar sized
to the used space of the scanned filesystem.
"""

import logging
import shutil
from pathlib import Path

from rich.markup import escape
from rich.progress import BarColumn, Progress, TaskID, TaskProgressColumn, TextColumn

from dutrim.tree import DirectoryIndexer, IndexCallbacks, Node
from dutrim.utils.formatting import err_console, print_warning

logger = logging.getLogger(__name__)


def used_space(path: Path) -> int:
    """Return the used bytes of the filesystem holding ``path``.

    Returns 0 if the filesystem cannot be queried.
    """
    try:
        usage = shutil.disk_usage(path)
    except OSError as e:
        logger.debug("Cannot query disk usage of %s: %s", path, e)
        return 0
    return usage.total - usage.free


class IndexReporter:
    """Reports indexing failures and progress.

    Attributes:
        failures: Number of failures reported so far.
        indexed_bytes: Sum of all subtree sizes reported so far.
    """

    def __init__(self, *, quiet: bool = False, progress: Progress | None = None) -> None:
        self._quiet = quiet
        self._progress = progress
        self._task: TaskID | None = None
        self._total = 0
        self.failures = 0
        self.indexed_bytes = 0

    def callbacks(self) -> IndexCallbacks:
        """Build the hook set passed to the indexer."""
        return IndexCallbacks(
            on_metadata_failure=self.metadata_failed,
            on_entry_failure=self.entry_failed,
            on_subtree_failure=self.subtree_failed,
            on_subtree_indexed=self.subtree_indexed,
        )

    def start(self, total: int) -> None:
        """Begin a progress task expecting ``total`` bytes."""
        self._total = max(total, 1)
        if self._progress is not None:
            self._task = self._progress.add_task("Indexing", total=self._total)

    def metadata_failed(self, error: OSError, path: Path) -> None:
        self._report(f"Failed to get metadata of file {path}: {error}")

    def entry_failed(self, error: OSError, parent: Path) -> None:
        self._report(f"Failed to resolve directory entry in {parent}: {error}")

    def subtree_failed(self, error: OSError, path: Path) -> None:
        self._report(f"Failed to inspect directory {path}: {error}")

    def subtree_indexed(self, size: int) -> None:
        self.indexed_bytes += size
        # Nested subtrees are reported at every level, so the count can
        # overtake the used space of the filesystem.
        if self.indexed_bytes > self._total:
            self._total += self.indexed_bytes
        if self._progress is not None and self._task is not None:
            self._progress.update(self._task, completed=self.indexed_bytes, total=self._total)

    def _report(self, message: str) -> None:
        self.failures += 1
        logger.info(message)
        if not self._quiet:
            print_warning(escape(message))


def index_with_progress(
    path: Path,
    *,
    skip_paths: list[str],
    show_progress: bool = True,
    quiet: bool = False,
) -> tuple[Node, IndexReporter]:
    """Index ``path`` while reporting progress and failures.

    Args:
        path: Root directory to index.
        skip_paths: Path prefixes never traversed.
        show_progress: Whether to display the progress bar.
        quiet: Suppress per-failure messages.

    Returns:
        Tuple of (root node, reporter holding failure and byte counts).

    Raises:
        OSError: If the root itself cannot be read.
    """
    if not show_progress or quiet:
        reporter = IndexReporter(quiet=quiet)
        root = DirectoryIndexer(reporter.callbacks(), skip_paths=skip_paths).index(path)
        return root, reporter

    progress = Progress(
        TextColumn("[info]{task.description}[/]"),
        BarColumn(),
        TaskProgressColumn(),
        console=err_console,
        transient=True,
    )
    reporter = IndexReporter(quiet=quiet, progress=progress)
    with progress:
        reporter.start(used_space(path))
        root = DirectoryIndexer(reporter.callbacks(), skip_paths=skip_paths).index(path)
    return root, reporter
