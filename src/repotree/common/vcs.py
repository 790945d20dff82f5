"""VCS kinds and the subprocess-backed drivers that clone and update them."""

from __future__ import annotations

import subprocess
from enum import Enum
from pathlib import Path
from typing import Protocol

from repotree.common.errors import DriverFailure


class VcsKind(Enum):
    """Version control systems a remote or local clone can belong to."""

    GIT = "git"
    MERCURIAL = "hg"
    SUBVERSION = "svn"
    UNKNOWN = "unknown"

    @property
    def marker(self) -> str | None:
        """Metadata directory found at the top of a working copy."""
        return _MARKERS.get(self)


_MARKERS: dict[VcsKind, str] = {
    VcsKind.GIT: ".git",
    VcsKind.MERCURIAL: ".hg",
    VcsKind.SUBVERSION: ".svn",
}

# Discovery checks markers in this order
KNOWN_KINDS = (VcsKind.GIT, VcsKind.MERCURIAL, VcsKind.SUBVERSION)


class VcsDriver(Protocol):
    """Capability set every backend provides."""

    def clone(self, url: str, dest: Path, shallow: bool = False) -> None: ...

    def update(self, path: Path) -> None: ...


def run_vcs(*args: str, cwd: Path | None = None) -> None:
    """Run a VCS command with output passed through to the terminal.

    Raises DriverFailure on a non-zero exit or a missing executable.
    """
    try:
        subprocess.run(list(args), cwd=cwd, check=True)
    except subprocess.CalledProcessError as e:
        raise DriverFailure(args, e.returncode) from e
    except FileNotFoundError as e:
        raise DriverFailure(args, None) from e


def _prepare_dest(dest: Path) -> None:
    """Create the parent directory of a clone target."""
    dest.parent.mkdir(parents=True, exist_ok=True)


class GitDriver:
    """git clone / git remote update."""

    def clone(self, url: str, dest: Path, shallow: bool = False) -> None:
        _prepare_dest(dest)
        args = ["git", "clone"]
        if shallow:
            args.extend(["--depth", "1"])
        run_vcs(*args, url, str(dest))

    def update(self, path: Path) -> None:
        run_vcs("git", "remote", "update", cwd=path)


class MercurialDriver:
    """hg clone / hg pull --update. Mercurial has no shallow clone."""

    def clone(self, url: str, dest: Path, shallow: bool = False) -> None:
        _prepare_dest(dest)
        run_vcs("hg", "clone", url, str(dest))

    def update(self, path: Path) -> None:
        run_vcs("hg", "pull", "--update", cwd=path)


class SubversionDriver:
    """svn checkout / svn update."""

    def clone(self, url: str, dest: Path, shallow: bool = False) -> None:
        _prepare_dest(dest)
        args = ["svn", "checkout"]
        if shallow:
            args.extend(["--depth", "immediates"])
        run_vcs(*args, url, str(dest))

    def update(self, path: Path) -> None:
        run_vcs("svn", "update", cwd=path)


def default_drivers() -> dict[VcsKind, VcsDriver]:
    """Driver registry for every known VCS kind."""
    return {
        VcsKind.GIT: GitDriver(),
        VcsKind.MERCURIAL: MercurialDriver(),
        VcsKind.SUBVERSION: SubversionDriver(),
    }


def detect_local_vcs(path: Path) -> VcsKind:
    """Return the VCS whose marker sits directly inside path, or UNKNOWN."""
    for kind in KNOWN_KINDS:
        if (path / str(kind.marker)).exists():
            return kind
    return VcsKind.UNKNOWN
