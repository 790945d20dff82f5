"""Turn repository specifiers (URLs or shorthands) into remote identities."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from urllib.parse import urlsplit

from repotree.common.config import DEFAULT_HOST
from repotree.common.errors import AmbiguousShorthand, InvalidSpecifier
from repotree.common.validate import ValidationError, validate_path_segment
from repotree.common.vcs import VcsKind
from repotree.repos.classify import classify

TRANSPORT_SCHEMES = frozenset({"https", "http", "ssh", "git", "svn", "svn+ssh"})
VCS_HINTS = frozenset({"git", "hg", "svn"})

# Schemes whose user part is a login rather than a credential
_SSH_SCHEMES = frozenset({"ssh", "svn+ssh"})

_SCHEME_RE = re.compile(r"^(?P<scheme>[a-zA-Z][a-zA-Z0-9+.-]*)://")
# user@host:owner/name, the form git prints for SSH remotes
_SCP_RE = re.compile(r"^(?P<user>[^@/:\s]+)@(?P<host>[^@/:\s]+):(?P<path>.+)$")

_GIT_SUFFIX = ".git"


@dataclass(frozen=True)
class RemoteIdentity:
    """Normalized name of a hosted repository."""

    scheme: str
    host: str
    owner: str  # may contain "/" when extra leading segments were folded in
    name: str
    vcs_hint: str | None = None  # "git", "hg" or "svn" from a vcs+scheme prefix
    user: str | None = None  # SSH login

    @property
    def path_parts(self) -> tuple[str, ...]:
        return (self.host, *self.owner.split("/"), self.name)

    @property
    def clone_url(self) -> str:
        """URL handed to the VCS executable."""
        userinfo = f"{self.user}@" if self.user else ""
        return f"{self.scheme}://{userinfo}{self.host}/{self.owner}/{self.name}"

    @property
    def url(self) -> str:
        """Canonical URL; resolving it again yields an equal identity."""
        if self.vcs_hint:
            return f"{self.vcs_hint}+{self.clone_url}"
        return self.clone_url


def resolve_specifier(raw: str, default_host: str = DEFAULT_HOST) -> RemoteIdentity:
    """Resolve a URL, SCP-style SSH address, or shorthand.

    Accepts:
    - https://github.com/owner/name(.git), ssh://git@host/owner/name
    - git+https://..., hg+ssh://..., svn://...
    - git@host:owner/name.git
    - host.tld/owner/name
    - owner/name (on default_host)

    Raises InvalidSpecifier or AmbiguousShorthand.
    """
    spec = raw.strip()
    if not spec:
        raise InvalidSpecifier(raw, "empty specifier")

    if _SCHEME_RE.match(spec):
        return _from_url(raw, spec)

    match = _SCP_RE.match(spec)
    if match:
        return _build(
            raw,
            scheme="ssh",
            host=match["host"],
            path=match["path"],
            user=match["user"],
        )

    return _from_shorthand(raw, spec, default_host)


def _from_url(raw: str, spec: str) -> RemoteIdentity:
    try:
        parts = urlsplit(spec)
    except ValueError as e:
        raise InvalidSpecifier(raw, str(e)) from e

    scheme = parts.scheme.lower()
    hint: str | None = None
    if scheme not in TRANSPORT_SCHEMES:
        hint, _, scheme = scheme.partition("+")
        if hint not in VCS_HINTS or scheme not in TRANSPORT_SCHEMES:
            raise InvalidSpecifier(raw, f"unsupported scheme {parts.scheme!r}")

    userinfo, _, host = parts.netloc.rpartition("@")
    if not host:
        raise InvalidSpecifier(raw, "missing host")

    # Only SSH logins are kept; anything else in userinfo is a credential
    user = userinfo.split(":")[0] if scheme in _SSH_SCHEMES and userinfo else None

    return _build(raw, scheme=scheme, host=host, path=parts.path, user=user, hint=hint)


def _from_shorthand(raw: str, spec: str, default_host: str) -> RemoteIdentity:
    segments = [s for s in spec.split("/") if s]
    if len(segments) < 2:
        raise AmbiguousShorthand(raw)

    # github.com/owner/name: a dotted first segment names the host
    if len(segments) >= 3 and "." in segments[0]:
        host, path = segments[0], "/".join(segments[1:])
    else:
        host, path = default_host, "/".join(segments)

    return _build(raw, scheme="https", host=host, path=path)


def _build(
    raw: str,
    *,
    scheme: str,
    host: str,
    path: str,
    user: str | None = None,
    hint: str | None = None,
) -> RemoteIdentity:
    path = path.strip("/")
    if path.endswith(_GIT_SUFFIX):
        path = path[: -len(_GIT_SUFFIX)]

    segments = [s for s in path.split("/") if s]
    if len(segments) < 2:
        raise InvalidSpecifier(raw, "expected <owner>/<name> in the path")

    try:
        validate_path_segment(host)
        for segment in segments:
            validate_path_segment(segment)
    except ValidationError as e:
        raise InvalidSpecifier(raw, str(e)) from e

    return RemoteIdentity(
        scheme=scheme,
        host=host,
        owner="/".join(segments[:-1]),
        name=segments[-1],
        vcs_hint=hint,
        user=user,
    )


def to_ssh(identity: RemoteIdentity) -> RemoteIdentity:
    """Rewrite an HTTP(S) identity to ssh://git@host/owner/name.

    Host (port included), owner and name are kept, so the SSH form resolves
    back to the same local path. Only git remotes can be rewritten.
    """
    if identity.scheme in _SSH_SCHEMES:
        return identity
    if identity.scheme not in ("https", "http"):
        raise InvalidSpecifier(
            identity.url, f"cannot rewrite {identity.scheme} remote to SSH"
        )
    if identity.vcs_hint not in (None, "git"):
        raise InvalidSpecifier(
            identity.url, f"cannot rewrite {identity.vcs_hint} remote to SSH"
        )
    return replace(identity, scheme="ssh", user="git", vcs_hint=None)


def is_valid(identity: RemoteIdentity) -> bool:
    """True if some VCS backend can fetch identity."""
    return classify(identity) is not VcsKind.UNKNOWN
