"""Find existing clones under the configured roots."""

from __future__ import annotations

import os
from collections.abc import Generator, Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path

from repotree.common.errors import FilesystemError
from repotree.common.ui import log
from repotree.common.vcs import KNOWN_KINDS, VcsKind, detect_local_vcs
from repotree.repos.paths import Subpath, decompose, subpaths_of

_MARKER_NAMES = frozenset(str(kind.marker) for kind in KNOWN_KINDS)

# (st_dev, st_ino) of every directory already descended into
Visited = set[tuple[int, int]]


@dataclass(frozen=True)
class LocalRepository:
    """A clone found on disk, relative to the root it was found under."""

    root: Path
    full_path: Path
    rel_path: str
    path_parts: tuple[str, ...]

    @classmethod
    def from_full_path(cls, root: Path, full_path: Path) -> LocalRepository:
        rel_path = full_path.relative_to(root).as_posix()
        return cls(
            root=root,
            full_path=full_path,
            rel_path=rel_path,
            path_parts=decompose(rel_path),
        )

    def subpaths(self) -> list[Subpath]:
        return subpaths_of(self.path_parts)

    def is_under(self, root: Path) -> bool:
        return self.root == root


def lookup(roots: Sequence[Path], rel_path: str) -> Path:
    """Where rel_path lives (or would live) under the primary root. No I/O."""
    return roots[0].joinpath(*decompose(rel_path))


def discover(roots: Sequence[Path]) -> Iterator[LocalRepository]:
    """Yield every clone under roots, in root order then name order.

    Each call walks the filesystem again. A directory holding a VCS marker
    is yielded and not descended into. Unreadable directories are reported
    and skipped.
    """
    visited: Visited = set()
    for root in roots:
        if not root.is_dir():
            continue
        visited = yield from _walk(root, root, visited)


def _physical_id(path: Path) -> tuple[int, int]:
    st = path.stat()
    return (st.st_dev, st.st_ino)


def _list_dirs(directory: Path) -> list[os.DirEntry[str]]:
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
        return [e for e in entries if e.name not in _MARKER_NAMES and e.is_dir()]
    except OSError as e:
        raise FilesystemError(directory, e.strerror or str(e)) from e


def _repo_kind(directory: Path) -> VcsKind:
    try:
        return detect_local_vcs(directory)
    except OSError as e:
        raise FilesystemError(directory, e.strerror or str(e)) from e


def _walk(
    root: Path, directory: Path, visited: Visited
) -> Generator[LocalRepository, None, Visited]:
    try:
        key = _physical_id(directory)
        if key in visited:
            return visited
        visited.add(key)
        entries = _list_dirs(directory)
    except OSError as e:
        log("warn", str(FilesystemError(directory, e.strerror or str(e))))
        return visited
    except FilesystemError as e:
        log("warn", str(e))
        return visited

    for entry in entries:
        child = Path(entry.path)
        try:
            kind = _repo_kind(child)
        except FilesystemError as e:
            log("warn", str(e))
            continue

        if kind is VcsKind.UNKNOWN:
            visited = yield from _walk(root, child, visited)
            continue

        yield LocalRepository.from_full_path(root, child)

    return visited
