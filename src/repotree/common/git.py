"""Git helpers used for reading configuration."""

from __future__ import annotations

import subprocess


def run_git(*args: str) -> str | None:
    """Run a git command and return stdout, or None on failure."""
    try:
        result = subprocess.run(
            ["git", *args],
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout.strip()
    except (subprocess.CalledProcessError, FileNotFoundError):
        return None


def git_config_values(key: str, *, path: bool = False) -> list[str]:
    """Return every value of a git config key (empty list when unset)."""
    args = ["config"]
    if path:
        args.append("--path")
    args.extend(["--get-all", key])

    result = run_git(*args)
    if not result:
        return []
    return [line.strip() for line in result.split("\n") if line.strip()]


def git_config_single(key: str) -> str | None:
    """Return the last value of a git config key, or None when unset."""
    values = git_config_values(key)
    return values[-1] if values else None
