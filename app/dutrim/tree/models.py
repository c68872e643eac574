"""In-memory tree model for indexed filesystem entries.

This module defines the Node structure produced by the indexer and
the path-addressed lookup and marking operations used to navigate
and stage entries for deletion.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path


@dataclass(slots=True)
class Node:
    """A single filesystem entry in the indexed tree.

    Each node exclusively owns its children. Navigation is always
    top-down by path, so nodes carry no parent references.

    Attributes:
        path: Absolute filesystem path, unique within the tree.
        size: Aggregate size in bytes. For a directory this is the sum of
            the sizes of its successfully indexed children.
        is_directory: Whether the entry is a directory. Fixed at construction.
        children: Child nodes sorted directories-first, then by path.
            Always empty for files.
        is_marked: Whether the entry is selected for deletion.
    """

    path: Path
    size: int
    is_directory: bool
    children: list[Node] = field(default_factory=list)
    is_marked: bool = False

    @property
    def name(self) -> str:
        """Final path component, or the full path for a filesystem root."""
        return self.path.name or str(self.path)

    def find_node(self, path: str | PathLike[str]) -> Node | None:
        """Find the node whose path equals ``path``.

        Descends from this node into whichever child is the target itself
        or a component-wise ancestor of it. No normalization is applied,
        so ``path`` should be one previously obtained from this tree.

        Args:
            path: Path of the node to look up.

        Returns:
            The matching node, or None if the path is not part of the tree.
        """
        target = Path(path)
        node = self
        if node.path == target:
            return node

        while True:
            for child in node.children:
                if child.path == target:
                    return child
                if target.is_relative_to(child.path):
                    node = child
                    break
            else:
                return None

    def mark(self, value: bool) -> None:
        """Set ``is_marked`` on this node and every descendant.

        Previous per-descendant markings are overwritten.
        """
        for node in self.walk():
            node.is_marked = value

    def walk(self) -> Iterator[Node]:
        """Yield this node and all descendants in depth-first pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def iter_marked(self) -> Iterator[Node]:
        """Yield the top-most marked descendants of this node.

        Marked children are yielded without descending into them;
        unmarked children are searched in turn. This node itself
        is never yielded.
        """
        stack = list(reversed(self.children))
        while stack:
            node = stack.pop()
            if node.is_marked:
                yield node
            else:
                stack.extend(reversed(node.children))


def sort_key(node: Node) -> tuple[bool, Path]:
    """Ordering key placing directories before files, then by path."""
    return (not node.is_directory, node.path)
