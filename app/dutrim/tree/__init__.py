"""Filesystem indexing and tree mutation.

This module provides the size-annotated Node tree, the recursive
indexer that builds it, and the deletion of marked entries.
"""

from dutrim.tree.indexer import SPECIAL_PATHS, DirectoryIndexer, IndexCallbacks, index_directory
from dutrim.tree.models import Node, sort_key
from dutrim.tree.operator import DeletionResult, TreeOperator, delete_marked

__all__ = [
    "SPECIAL_PATHS",
    "DeletionResult",
    "DirectoryIndexer",
    "IndexCallbacks",
    "Node",
    "TreeOperator",
    "delete_marked",
    "index_directory",
    "sort_key",
]
