"""Directory indexer.

Walks a directory subtree depth-first and builds a size-annotated
Node tree. Failures below the root never abort the walk: they are
reported through caller-supplied hooks and the affected entry or
subtree is left out of the tree.

Symlinks are never followed below the root. A symlink entry is
indexed as a leaf whose size is that of the link itself, so link
cycles cannot cause an endless walk.
"""

import logging
import os
import stat
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path

from dutrim.tree.models import Node, sort_key

logger = logging.getLogger(__name__)

# Pseudo-filesystems that are represented as empty directories
SPECIAL_PATHS: tuple[str, ...] = ("/dev", "/proc", "/mnt")


def _ignore_failure(_error: OSError, _path: Path) -> None:
    return None


def _ignore_size(_size: int) -> None:
    return None


@dataclass(slots=True)
class IndexCallbacks:
    """Observability hooks invoked while indexing.

    Hooks are called for reporting only. Their return values are
    ignored and the walk continues after every call.

    Attributes:
        on_metadata_failure: Called with the error and the entry path when
            an entry's metadata cannot be read. The entry is skipped.
        on_entry_failure: Called with the error and the directory path when
            listing a directory fails mid-stream. Remaining entries of that
            directory are not consumed.
        on_subtree_failure: Called with the error and the subdirectory path
            when a subdirectory cannot be indexed. The subtree is omitted.
        on_subtree_indexed: Called with the total size in bytes of each
            successfully indexed subdirectory.
    """

    on_metadata_failure: Callable[[OSError, Path], None] = _ignore_failure
    on_entry_failure: Callable[[OSError, Path], None] = _ignore_failure
    on_subtree_failure: Callable[[OSError, Path], None] = _ignore_failure
    on_subtree_indexed: Callable[[int], None] = _ignore_size


class DirectoryIndexer:
    """Builds a Node tree from the real filesystem.

    Args:
        callbacks: Hooks for failure and progress reporting.
        skip_paths: Path prefixes that are never traversed. Matching
            paths become empty directory nodes of size 0.
    """

    def __init__(
        self,
        callbacks: IndexCallbacks | None = None,
        *,
        skip_paths: Sequence[str] = SPECIAL_PATHS,
    ) -> None:
        self._callbacks = callbacks or IndexCallbacks()
        self._skip_paths = tuple(Path(p) for p in skip_paths)

    def index(self, path: str | os.PathLike[str]) -> Node:
        """Index the subtree rooted at ``path``.

        Relative paths are made absolute against the working directory.

        Args:
            path: Root of the subtree to index.

        Returns:
            Fully populated root Node.

        Raises:
            OSError: If the root itself cannot be read.
        """
        root = Path(path).absolute()
        logger.debug("Indexing %s", root)

        if self._is_skipped(root):
            logger.debug("Skipping special path: %s", root)
            return Node(path=root, size=0, is_directory=True)

        st = root.stat()
        if not stat.S_ISDIR(st.st_mode):
            return Node(path=root, size=st.st_size, is_directory=False)

        node = Node(path=root, size=0, is_directory=True)
        self._walk(node, self._list_directory(root))
        return node

    def _walk(self, root: Node, entries: Iterator[os.DirEntry[str]]) -> None:
        """Populate ``root`` depth-first without recursion.

        Each stack frame holds a directory node and its remaining entries.
        A directory is sorted, and its size added to its parent, once all
        of its entries are consumed.
        """
        stack: list[tuple[Node, Iterator[os.DirEntry[str]]]] = [(root, entries)]
        while stack:
            node, remaining = stack[-1]
            entry = next(remaining, None)

            if entry is None:
                stack.pop()
                node.children.sort(key=sort_key)
                if stack:
                    parent = stack[-1][0]
                    parent.size += node.size
                    parent.children.append(node)
                    self._callbacks.on_subtree_indexed(node.size)
                continue

            entry_path = Path(entry.path)
            try:
                st = entry.stat(follow_symlinks=False)
            except OSError as e:
                logger.debug("Cannot read metadata of %s: %s", entry_path, e)
                self._callbacks.on_metadata_failure(e, entry_path)
                continue

            mode = st.st_mode
            if stat.S_ISREG(mode) or stat.S_ISLNK(mode):
                node.size += st.st_size
                node.children.append(Node(path=entry_path, size=st.st_size, is_directory=False))
            elif stat.S_ISDIR(mode):
                child = Node(path=entry_path, size=0, is_directory=True)
                if self._is_skipped(entry_path):
                    logger.debug("Skipping special path: %s", entry_path)
                    stack.append((child, iter(())))
                    continue
                try:
                    child_entries = self._list_directory(entry_path)
                except OSError as e:
                    logger.debug("Cannot index directory %s: %s", entry_path, e)
                    self._callbacks.on_subtree_failure(e, entry_path)
                    continue
                stack.append((child, child_entries))
            else:
                # fifo, socket, device node
                logger.debug("Ignoring special file: %s", entry_path)

    def _list_directory(self, directory: Path) -> Iterator[os.DirEntry[str]]:
        """Read the entries of ``directory`` and close the handle.

        Raises:
            OSError: If the directory cannot be opened.
        """
        with os.scandir(directory) as entries:
            return iter(list(self._iter_entries(entries, directory)))

    def _iter_entries(
        self, entries: Iterator[os.DirEntry[str]], directory: Path
    ) -> Iterator[os.DirEntry[str]]:
        """Yield directory entries until the listing is exhausted or fails."""
        iterator = iter(entries)
        while True:
            try:
                entry = next(iterator)
            except StopIteration:
                return
            except OSError as e:
                logger.debug("Listing of %s stopped: %s", directory, e)
                self._callbacks.on_entry_failure(e, directory)
                return
            yield entry

    def _is_skipped(self, path: Path) -> bool:
        return any(path.is_relative_to(prefix) for prefix in self._skip_paths)


def index_directory(
    path: str | os.PathLike[str],
    callbacks: IndexCallbacks | None = None,
    *,
    skip_paths: Sequence[str] = SPECIAL_PATHS,
) -> Node:
    """Index the subtree rooted at ``path``.

    Convenience wrapper around :meth:`DirectoryIndexer.index`.

    Raises:
        OSError: If the root itself cannot be read.
    """
    return DirectoryIndexer(callbacks, skip_paths=skip_paths).index(path)
