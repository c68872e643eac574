"""Unit tests for TreeOperator and delete_marked.

Tests removal of marked files and directories, failure isolation,
dry-run mode and the stale tree left after deletion.
"""

from pathlib import Path
from unittest.mock import patch

from dutrim.tree.indexer import index_directory
from dutrim.tree.models import Node
from dutrim.tree.operator import DeletionResult, TreeOperator, delete_marked


def _marked(root: Node, path: Path) -> Node:
    node = root.find_node(path)
    assert node is not None
    node.mark(True)
    return node


class TestDeleteMarked:
    """Tests for removing marked entries."""

    def test_mark_root_then_delete(self, sample_tree: Path) -> None:
        """Marking the root marks a, b, c; deleting removes a and b."""
        root = index_directory(sample_tree)
        root.mark(True)

        assert all(n.is_marked for n in root.walk())

        results = delete_marked(root)

        assert [r.path for r in results] == [str(sample_tree / "b"), str(sample_tree / "a")]
        assert all(r.success for r in results)
        assert not (sample_tree / "a").exists()
        assert not (sample_tree / "b").exists()
        # The root itself is never removed
        assert sample_tree.is_dir()

    def test_unmarked_entries_untouched(self, sample_tree: Path) -> None:
        """Only marked entries are removed."""
        root = index_directory(sample_tree)
        _marked(root, sample_tree / "a")

        results = delete_marked(root)

        assert len(results) == 1
        assert results[0] == DeletionResult(path=str(sample_tree / "a"), size=10, success=True)
        assert not (sample_tree / "a").exists()
        assert (sample_tree / "b" / "c").exists()

    def test_deeper_marked_entries_found(self, sample_tree: Path) -> None:
        """Unmarked directories are searched for marked descendants."""
        root = index_directory(sample_tree)
        _marked(root, sample_tree / "b" / "c")

        results = delete_marked(root)

        assert [r.path for r in results] == [str(sample_tree / "b" / "c")]
        assert not (sample_tree / "b" / "c").exists()
        assert (sample_tree / "b").is_dir()
        assert (sample_tree / "a").exists()

    def test_nothing_marked(self, sample_tree: Path) -> None:
        """With no marks nothing is removed."""
        root = index_directory(sample_tree)

        assert delete_marked(root) == []
        assert (sample_tree / "a").exists()
        assert (sample_tree / "b" / "c").exists()

    def test_tree_is_stale_after_delete(self, sample_tree: Path) -> None:
        """Removed entries remain in the in-memory tree."""
        root = index_directory(sample_tree)
        root.mark(True)

        delete_marked(root)

        assert [c.name for c in root.children] == ["b", "a"]
        assert root.size == 15
        b = root.find_node(sample_tree / "b")
        assert b is not None
        assert b.is_marked is True
        assert not b.path.exists()

    def test_failure_does_not_stop_siblings(self, sample_tree: Path) -> None:
        """A failed directory removal does not prevent removing the file."""
        root = index_directory(sample_tree)
        root.mark(True)

        with patch(
            "dutrim.tree.operator.shutil.rmtree",
            side_effect=PermissionError(13, "Permission denied"),
        ):
            results = delete_marked(root)

        assert len(results) == 2
        failed, removed = results
        assert failed.path == str(sample_tree / "b")
        assert failed.success is False
        assert failed.error is not None
        assert "Permission denied" in failed.error
        assert removed.success is True
        assert not (sample_tree / "a").exists()
        assert (sample_tree / "b" / "c").exists()

    def test_failure_in_one_subtree_not_another(self, tmp_path: Path) -> None:
        """Failures are isolated across unrelated subtrees."""
        for rel in ("x/keep", "y/gone"):
            path = tmp_path / rel
            path.parent.mkdir(parents=True)
            path.write_bytes(b"1")
        root = index_directory(tmp_path)
        _marked(root, tmp_path / "x" / "keep")
        _marked(root, tmp_path / "y" / "gone")
        real_unlink = Path.unlink

        def unlink(self: Path, missing_ok: bool = False) -> None:
            if self.name == "keep":
                raise PermissionError(13, "Permission denied", str(self))
            real_unlink(self, missing_ok=missing_ok)

        with patch.object(Path, "unlink", unlink):
            results = delete_marked(root)

        assert [r.success for r in results] == [False, True]
        assert (tmp_path / "x" / "keep").exists()
        assert not (tmp_path / "y" / "gone").exists()

    def test_already_removed_entry_reported(self, sample_tree: Path) -> None:
        """An entry that vanished before deletion is reported as a failure."""
        root = index_directory(sample_tree)
        _marked(root, sample_tree / "a")
        (sample_tree / "a").unlink()

        results = delete_marked(root)

        assert len(results) == 1
        assert results[0].success is False
        assert results[0].error is not None
        assert "does not exist" in results[0].error

    def test_symlink_to_directory_removes_link_only(self, sample_tree: Path) -> None:
        """Removing a symlinked directory unlinks it without touching the target."""
        link = sample_tree / "link"
        link.symlink_to(sample_tree / "b")
        root = index_directory(sample_tree)
        _marked(root, link)

        results = delete_marked(root)

        assert results[0].success is True
        assert not link.is_symlink()
        assert (sample_tree / "b" / "c").exists()


class TestDryRun:
    """Tests for dry-run mode."""

    def test_dry_run_removes_nothing(self, sample_tree: Path) -> None:
        """Dry-run reports every marked entry without removing it."""
        root = index_directory(sample_tree)
        root.mark(True)

        results = TreeOperator(dry_run=True).delete_marked(root)

        assert len(results) == 2
        for result in results:
            assert result.success is True
            assert result.dry_run is True
            assert result.error is None
        assert [r.size for r in results] == [5, 10]
        assert (sample_tree / "a").exists()
        assert (sample_tree / "b" / "c").exists()

    def test_function_forwards_dry_run(self, sample_tree: Path) -> None:
        """delete_marked passes dry_run through to the operator."""
        root = index_directory(sample_tree)
        root.mark(True)

        results = delete_marked(root, dry_run=True)

        assert all(r.dry_run for r in results)
        assert (sample_tree / "a").exists()
