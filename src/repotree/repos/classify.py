"""Decide which VCS owns a remote from its URL alone.

The network is never probed: a self-hosted Mercurial or Subversion server
whose hostname matches none of the patterns below is treated as git.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from repotree.common.validate import (
    ValidationError,
    validate_github_owner,
    validate_github_repo,
)
from repotree.common.vcs import VcsKind

if TYPE_CHECKING:
    from repotree.repos.remote import RemoteIdentity

# Hosts that only serve <owner>/<name>; deeper paths are web pages, not repos
FIXED_LAYOUT_HOSTS = frozenset({"github.com", "bitbucket.org", "codeberg.org"})

MERCURIAL_HOST_PATTERNS = (
    re.compile(r"^hg\."),
    re.compile(r"^foss\.heptapod\.net$"),
)

SUBVERSION_HOST_PATTERNS = (
    re.compile(r"^svn\."),
    re.compile(r"\.svn\.sourceforge\.net$"),
    re.compile(r"^svn\.code\.sf\.net$"),
)

_HINT_KINDS: dict[str, VcsKind] = {
    "git": VcsKind.GIT,
    "hg": VcsKind.MERCURIAL,
    "svn": VcsKind.SUBVERSION,
}


def _bare_host(host: str) -> str:
    return host.split(":")[0].lower()


def has_valid_shape(identity: RemoteIdentity) -> bool:
    """Check the identity could name a repository at all."""
    if not identity.host or not identity.owner or not identity.name:
        return False
    if "/" in identity.name:
        return False

    host = _bare_host(identity.host)
    if host in FIXED_LAYOUT_HOSTS and "/" in identity.owner:
        return False

    if host == "github.com":
        try:
            validate_github_owner(identity.owner)
            validate_github_repo(identity.name)
        except ValidationError:
            return False

    return True


def classify(identity: RemoteIdentity) -> VcsKind:
    """Return the VcsKind for identity, or UNKNOWN if it is not a repository.

    First match wins: shape check, explicit hint or svn scheme,
    Mercurial hosts, Subversion hosts, then git.
    """
    if not has_valid_shape(identity):
        return VcsKind.UNKNOWN

    if identity.vcs_hint:
        return _HINT_KINDS.get(identity.vcs_hint, VcsKind.UNKNOWN)
    if identity.scheme.startswith("svn"):
        return VcsKind.SUBVERSION

    host = _bare_host(identity.host)
    if any(pattern.search(host) for pattern in MERCURIAL_HOST_PATTERNS):
        return VcsKind.MERCURIAL
    if any(pattern.search(host) for pattern in SUBVERSION_HOST_PATTERNS):
        return VcsKind.SUBVERSION

    return VcsKind.GIT
