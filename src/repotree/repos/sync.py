"""Clone or update one remote repository into its place under the primary root."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from enum import Enum
from pathlib import Path
from typing import NamedTuple

from repotree.common.errors import DriverFailure, RepoTreeError, UnknownVcs
from repotree.common.ui import log
from repotree.common.vcs import VcsDriver, VcsKind, detect_local_vcs
from repotree.repos.classify import classify
from repotree.repos.discovery import lookup
from repotree.repos.paths import to_rel_path
from repotree.repos.remote import RemoteIdentity


class SyncOutcome(Enum):
    CLONED = "cloned"
    UPDATED = "updated"
    EXISTS = "exists"
    FAILED = "failed"


class SyncResult(NamedTuple):
    """What happened to one target."""

    outcome: SyncOutcome
    path: Path
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is not SyncOutcome.FAILED


def sync(
    identity: RemoteIdentity,
    roots: Sequence[Path],
    drivers: Mapping[VcsKind, VcsDriver],
    *,
    update: bool = False,
    shallow: bool = False,
) -> SyncResult:
    """Clone identity if missing, update it if asked, otherwise leave it alone.

    Raises UnknownVcs before touching the filesystem if no backend
    recognizes the remote. Driver failures come back as FAILED results.
    """
    kind = classify(identity)
    if kind is VcsKind.UNKNOWN:
        raise UnknownVcs(identity.url)

    path = lookup(roots, to_rel_path(identity))

    if not path.exists():
        log("clone", f"{identity.clone_url} -> {path}")
        try:
            drivers[kind].clone(identity.clone_url, path, shallow)
        except DriverFailure as e:
            return SyncResult(SyncOutcome.FAILED, path, str(e))
        return SyncResult(SyncOutcome.CLONED, path)

    if not update:
        log("exists", str(path))
        return SyncResult(SyncOutcome.EXISTS, path)

    # Trust what is on disk over what the URL suggests
    local_kind = detect_local_vcs(path)
    if local_kind is VcsKind.UNKNOWN:
        local_kind = kind

    log("update", str(path))
    try:
        drivers[local_kind].update(path)
    except DriverFailure as e:
        return SyncResult(SyncOutcome.FAILED, path, str(e))
    return SyncResult(SyncOutcome.UPDATED, path)


def sync_many(
    identities: Iterable[RemoteIdentity],
    roots: Sequence[Path],
    drivers: Mapping[VcsKind, VcsDriver],
    *,
    update: bool = False,
    shallow: bool = False,
) -> list[SyncResult]:
    """Sync targets one after another; a failing target does not stop the batch."""
    results: list[SyncResult] = []
    for identity in identities:
        try:
            result = sync(identity, roots, drivers, update=update, shallow=shallow)
        except RepoTreeError as e:
            log("skip", str(e))
            continue
        if not result.ok:
            log("error", f"{identity.url}: {result.reason}")
        results.append(result)
    return results
