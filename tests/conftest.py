"""Shared fixtures for fslink-manager tests."""

from pathlib import Path

import pytest

from fslink_manager.store import MARKER_DIR_ENV, LinkStore


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME at a scratch directory so global config never leaks in."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv(MARKER_DIR_ENV, raising=False)
    return home


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    """Directory holding the files and links under test."""
    path = tmp_path / "work"
    path.mkdir()
    return path.resolve()


@pytest.fixture
def store(workdir: Path) -> LinkStore:
    """Store initialized in the working directory."""
    return LinkStore.init(workdir)


@pytest.fixture
def source_file(workdir: Path) -> Path:
    """An existing regular file to link to."""
    path = workdir / "file.txt"
    path.write_text("hello")
    return path
