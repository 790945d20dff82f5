"""Input validation for repository specifiers and path segments."""

from __future__ import annotations

import re

# GitHub limits
GITHUB_OWNER_MAX_LENGTH = 39
GITHUB_REPO_MAX_LENGTH = 100

# Characters that can never appear in a directory name we create
_FORBIDDEN_SEGMENT_CHARS = ("/", "\\", "\0")


class ValidationError(Exception):
    """Raised when input validation fails."""

    pass


def validate_path_segment(segment: str) -> str:
    """Validate a single host/owner/name component used as a directory name.

    Returns the segment or raises ValidationError.
    """
    if not segment:
        raise ValidationError("Path segment cannot be empty")

    # Block path traversal
    if segment in (".", ".."):
        raise ValidationError(
            f"Invalid path segment: {segment!r} (path traversal not allowed)"
        )

    for char in _FORBIDDEN_SEGMENT_CHARS:
        if char in segment:
            raise ValidationError(
                f"Invalid path segment: {segment!r} (contains {char!r})"
            )

    if segment != segment.strip():
        raise ValidationError(
            f"Invalid path segment: {segment!r} (leading or trailing whitespace)"
        )

    return segment


def validate_github_owner(owner: str) -> str:
    """Validate GitHub username/organization name.

    GitHub usernames: 1-39 chars, alphanumeric or hyphen, cannot start with hyphen.
    Returns validated name or raises ValidationError.
    """
    if not owner:
        raise ValidationError("GitHub owner cannot be empty")

    if len(owner) > GITHUB_OWNER_MAX_LENGTH:
        raise ValidationError(f"GitHub owner too long: {owner!r}")

    if not re.match(r"^[a-zA-Z0-9][a-zA-Z0-9-]*$", owner):
        raise ValidationError(f"Invalid GitHub owner: {owner!r}")

    # Cannot have consecutive hyphens or end with hyphen
    if "--" in owner or owner.endswith("-"):
        raise ValidationError(f"Invalid GitHub owner: {owner!r}")

    return owner


def validate_github_repo(repo: str) -> str:
    """Validate GitHub repository name.

    Returns validated name or raises ValidationError.
    """
    if not repo:
        raise ValidationError("Repository name cannot be empty")

    if len(repo) > GITHUB_REPO_MAX_LENGTH:
        raise ValidationError(f"Repository name too long: {repo!r}")

    # GitHub repo names: alphanumeric, hyphens, underscores, dots
    # Cannot be just dots
    if repo in (".", ".."):
        raise ValidationError(f"Invalid repository name: {repo!r}")

    if not re.match(r"^[a-zA-Z0-9._-]+$", repo):
        raise ValidationError(f"Invalid repository name: {repo!r}")

    return repo
