"""Error types raised by repotree operations."""

from __future__ import annotations

from collections.abc import Sequence


class RepoTreeError(Exception):
    """Base class for errors reported to the user."""


class InvalidSpecifier(RepoTreeError):
    """Raised when a repository specifier cannot be parsed."""

    def __init__(self, specifier: str, reason: str) -> None:
        super().__init__(f"Invalid repository specifier {specifier!r}: {reason}")
        self.specifier = specifier
        self.reason = reason


class AmbiguousShorthand(RepoTreeError):
    """Raised when a shorthand names fewer than owner and name."""

    def __init__(self, specifier: str) -> None:
        super().__init__(
            f"Ambiguous repository {specifier!r}: use <owner>/<name> or a full URL"
        )
        self.specifier = specifier


class UnknownVcs(RepoTreeError):
    """Raised when no VCS backend recognizes a remote."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Not a valid repository: {url}")
        self.url = url


class NotFound(RepoTreeError):
    """Raised when a query matches no local repository."""

    def __init__(self, query: str) -> None:
        super().__init__(f"No repository found for {query!r}")
        self.query = query


class AmbiguousMatch(RepoTreeError):
    """Raised when a query matches more than one local repository."""

    def __init__(self, query: str, candidates: Sequence[Sequence[str]]) -> None:
        lines = "\n".join(f"  - {'/'.join(parts)}" for parts in candidates)
        super().__init__(
            f"More than one repository matches {query!r}; try a more precise name:\n"
            f"{lines}"
        )
        self.query = query
        self.candidates = [tuple(parts) for parts in candidates]


class DriverFailure(RepoTreeError):
    """Raised when a VCS command exits non-zero or cannot be started."""

    def __init__(self, command: Sequence[str], returncode: int | None) -> None:
        status = "not found" if returncode is None else f"exit status {returncode}"
        super().__init__(f"Command failed ({status}): {' '.join(command)}")
        self.command = list(command)
        self.returncode = returncode


class FilesystemError(RepoTreeError):
    """Raised when a directory cannot be read during discovery."""

    def __init__(self, path: object, reason: str) -> None:
        super().__init__(f"Cannot read {path}: {reason}")
        self.path = path
        self.reason = reason
