"""Shared test fixtures for repotree."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from repotree.common.errors import DriverFailure
from repotree.common.vcs import VcsKind


class RecordingDriver:
    """VCS driver that records calls and fakes a clone on disk."""

    def __init__(self, marker: str = ".git", *, fail: bool = False) -> None:
        self.marker = marker
        self.fail = fail
        self.calls: list[tuple] = []

    def clone(self, url: str, dest: Path, shallow: bool = False) -> None:
        self.calls.append(("clone", url, dest, shallow))
        if self.fail:
            raise DriverFailure(["fake", "clone", url], 128)
        (dest / self.marker).mkdir(parents=True)

    def update(self, path: Path) -> None:
        self.calls.append(("update", path))
        if self.fail:
            raise DriverFailure(["fake", "update"], 1)


@pytest.fixture
def drivers() -> dict[VcsKind, RecordingDriver]:
    """One recording driver per VCS kind."""
    return {
        VcsKind.GIT: RecordingDriver(".git"),
        VcsKind.MERCURIAL: RecordingDriver(".hg"),
        VcsKind.SUBVERSION: RecordingDriver(".svn"),
    }


@pytest.fixture
def failing_drivers() -> dict[VcsKind, RecordingDriver]:
    """Drivers whose every call fails."""
    return {
        VcsKind.GIT: RecordingDriver(".git", fail=True),
        VcsKind.MERCURIAL: RecordingDriver(".hg", fail=True),
        VcsKind.SUBVERSION: RecordingDriver(".svn", fail=True),
    }


@pytest.fixture
def roots(tmp_path: Path) -> tuple[Path, Path]:
    """Two empty roots; the first is primary."""
    r1 = tmp_path / "r1"
    r2 = tmp_path / "r2"
    r1.mkdir()
    r2.mkdir()
    return (r1, r2)


@pytest.fixture
def make_repo() -> Callable[..., Path]:
    """Create a fake clone (a directory holding a VCS marker)."""

    def _make(root: Path, rel_path: str, marker: str = ".git") -> Path:
        repo = root.joinpath(*rel_path.split("/"))
        (repo / marker).mkdir(parents=True)
        return repo

    return _make
