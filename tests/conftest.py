"""Shared pytest fixtures for directory listing tests."""

import os

import pytest

from mcp_server_dirlist.iteration_controller import IterationController
from mcp_server_dirlist.session_registry import SessionRegistry


@pytest.fixture
def sample_dir(tmp_path):
    """Create a directory with a file, a subdirectory and two symlinks."""
    root = tmp_path / "sample"
    root.mkdir()

    a_txt = root / "a.txt"
    a_txt.write_bytes(b"0123456789")
    os.chmod(a_txt, 0o644)

    sub = root / "sub"
    sub.mkdir()
    os.chmod(sub, 0o755)

    os.symlink("a.txt", root / "link")
    os.symlink("missing.txt", root / "broken")
    return root


@pytest.fixture
def small_dir(tmp_path):
    """Create the a.txt + sub directory used by the row limit examples."""
    root = tmp_path / "small"
    root.mkdir()
    (root / "a.txt").write_bytes(b"0123456789")
    os.chmod(root / "a.txt", 0o644)
    (root / "sub").mkdir()
    os.chmod(root / "sub", 0o755)
    return root


@pytest.fixture
def make_dir(tmp_path):
    """Factory creating a directory holding ``count`` files named ``prefix_i``."""

    def _make(name: str, count: int, prefix: str = "f"):
        root = tmp_path / name
        root.mkdir()
        for i in range(count):
            (root / f"{prefix}_{i}").write_text(str(i))
        return root

    return _make


@pytest.fixture
def registry():
    """Create a fresh SessionRegistry and release its cursors afterwards."""
    reg = SessionRegistry(completed_token_ttl=60)
    yield reg
    reg.close_all()


@pytest.fixture
def controller(registry):
    """Create an IterationController over the fresh registry."""
    return IterationController(registry)
