"""GitHub CLI operations for bulk import."""

from __future__ import annotations

import json
import os
import subprocess
from typing import Any


def run_gh(*args: str, token: str | None = None) -> str | None:
    """Run a gh CLI command and return stdout, or None on failure.

    When token is given it overrides whatever gh is logged in with.
    """
    env = None
    if token:
        env = {**os.environ, "GH_TOKEN": token}
    try:
        result = subprocess.run(
            ["gh", *args],
            capture_output=True,
            text=True,
            check=True,
            env=env,
        )
        return result.stdout.strip()
    except (subprocess.CalledProcessError, FileNotFoundError):
        return None


def run_gh_json(*args: str, token: str | None = None) -> Any | None:
    """Run a gh CLI command and parse JSON output."""
    result = run_gh(*args, token=token)
    if result is None:
        return None
    try:
        return json.loads(result)
    except json.JSONDecodeError:
        return None


def list_starred(user: str, token: str | None = None) -> list[str] | None:
    """Return HTML URLs of repositories starred by user, oldest star first.

    Returns None if the API call fails.
    """
    # --slurp joins the paginated arrays into one list of pages
    pages = run_gh_json(
        "api",
        "--paginate",
        "--slurp",
        f"users/{user}/starred?sort=created&direction=asc&per_page=100",
        token=token,
    )
    if pages is None:
        return None

    urls: list[str] = []
    for page in pages:
        for repo in page:
            url = repo.get("html_url") if isinstance(repo, dict) else None
            if url:
                urls.append(url)
    return urls
