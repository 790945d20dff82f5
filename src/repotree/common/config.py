"""Process-wide configuration: roots, default host, and tokens.

Loaded once at startup and passed explicitly to everything that needs it.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from repotree.common.git import git_config_single, git_config_values

DEFAULT_HOST = "github.com"
DEFAULT_ROOT = "~/repos"

ROOT_ENV = "REPOTREE_ROOT"
HOST_ENV = "REPOTREE_DEFAULT_HOST"
TOKEN_ENV = "REPOTREE_GITHUB_TOKEN"


@dataclass(frozen=True)
class Config:
    """Immutable settings for one process run."""

    roots: tuple[Path, ...]
    default_host: str = DEFAULT_HOST
    github_token: str | None = None

    @property
    def primary_root(self) -> Path:
        return self.roots[0]


def _normalize_roots(entries: list[str]) -> tuple[Path, ...]:
    roots: list[Path] = []
    for entry in entries:
        if not entry:
            continue
        root = Path(entry).expanduser().absolute()
        if root not in roots:
            roots.append(root)
    return tuple(roots)


def load_roots(environ: Mapping[str, str]) -> tuple[Path, ...]:
    """Resolve roots from the environment, then git config, then the default."""
    env_value = environ.get(ROOT_ENV, "")
    roots = _normalize_roots(env_value.split(os.pathsep))
    if roots:
        return roots

    roots = _normalize_roots(git_config_values("repotree.root", path=True))
    if roots:
        return roots

    return _normalize_roots([DEFAULT_ROOT])


def load_config(environ: Mapping[str, str] | None = None) -> Config:
    """Load the configuration once for the current process."""
    if environ is None:
        environ = os.environ

    default_host = (
        environ.get(HOST_ENV) or git_config_single("repotree.host") or DEFAULT_HOST
    )
    token = environ.get(TOKEN_ENV) or git_config_single("repotree.github.token")

    return Config(
        roots=load_roots(environ),
        default_host=default_host,
        github_token=token or None,
    )
