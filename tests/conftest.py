"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolated_config_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG_CONFIG_HOME at a temporary directory."""
    config_home = tmp_path / "xdg-config"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    return config_home


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """Directory ``root`` with file ``a`` (10 bytes) and ``b/c`` (5 bytes)."""
    root = tmp_path / "root"
    root.mkdir()
    (root / "a").write_bytes(b"x" * 10)
    (root / "b").mkdir()
    (root / "b" / "c").write_bytes(b"y" * 5)
    return root
