"""Mapping between remote identities and relative paths under a root.

Relative paths are always slash separated so they print and match the same
way on every platform; full paths are pathlib objects.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from repotree.repos.remote import RemoteIdentity

SEP = "/"

Subpath = tuple[str, ...]


def to_rel_path(identity: RemoteIdentity) -> str:
    """host/owner/name for identity, case preserved."""
    return SEP.join(identity.path_parts)


def decompose(rel_path: str) -> tuple[str, ...]:
    """Split a relative path into its segments."""
    if os.sep != SEP:
        rel_path = rel_path.replace(os.sep, SEP)
    return tuple(part for part in rel_path.split(SEP) if part)


def subpaths_of(parts: tuple[str, ...]) -> list[Subpath]:
    """Suffixes of parts, shortest first.

    >>> subpaths_of(("github.com", "alice", "foo"))
    [('foo',), ('alice', 'foo'), ('github.com', 'alice', 'foo')]
    """
    return [parts[len(parts) - n :] for n in range(1, len(parts) + 1)]


def format_subpath(subpath: Subpath) -> str:
    return SEP.join(subpath)


def matches_query(rel_path: str, query: str, exact: bool = False) -> bool:
    """Check whether rel_path matches a user query.

    Exact mode accepts the whole path or any trailing run of segments
    (``foo``, ``alice/foo``, ``github.com/alice/foo``). Otherwise query
    is a plain substring test, so an empty query matches everything.
    """
    if not exact:
        return query in rel_path
    if not query:
        return False
    return rel_path == query or rel_path.endswith(SEP + query)
