"""Query matching and shortest-unique naming for local repositories."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from pathlib import Path

from repotree.common.errors import AmbiguousMatch, NotFound
from repotree.repos.discovery import LocalRepository
from repotree.repos.paths import format_subpath, matches_query


def find_matches(
    repos: Iterable[LocalRepository], query: str, exact: bool = False
) -> list[LocalRepository]:
    """Repositories matching query, in discovery order."""
    return [repo for repo in repos if matches_query(repo.rel_path, query, exact)]


def resolve_single(repos: Iterable[LocalRepository], query: str) -> LocalRepository:
    """Exactly one repository named by query.

    Raises NotFound or AmbiguousMatch; never picks between candidates.
    """
    found = find_matches(repos, query, exact=True)
    if not found:
        raise NotFound(query)
    if len(found) > 1:
        raise AmbiguousMatch(query, [repo.path_parts for repo in found])
    return found[0]


def unique_subpaths(
    repos: Iterable[LocalRepository], primary_root: Path
) -> list[tuple[LocalRepository, str]]:
    """Pair each repository with its shortest globally unique subpath.

    A rel_path present under several roots is only listed for its copy
    under primary_root. Repositories without any unique subpath are left
    out. Assignment is greedy per repository, shortest first.
    """
    repos = list(repos)
    roots_per_path = Counter(repo.rel_path for repo in repos)
    eligible = [
        repo
        for repo in repos
        if roots_per_path[repo.rel_path] == 1 or repo.is_under(primary_root)
    ]

    subpath_count = Counter(
        subpath for repo in eligible for subpath in repo.subpaths()
    )

    result: list[tuple[LocalRepository, str]] = []
    for repo in eligible:
        for subpath in repo.subpaths():
            if subpath_count[subpath] == 1:
                result.append((repo, format_subpath(subpath)))
                break
    return result
