"""rt: keep clones of remote repositories under <root>/<host>/<owner>/<name>."""

from __future__ import annotations

import json
import sys
from collections.abc import Iterable, Iterator, Mapping
from typing import NamedTuple, TextIO

import click

from repotree.common import (
    RepoTreeError,
    UnknownVcs,
    VcsDriver,
    VcsKind,
    default_drivers,
    fuzzy_select,
    log,
    style_dim,
    style_error,
    style_success,
    style_warn,
)
from repotree.common.config import Config, load_config
from repotree.common.github import list_starred
from repotree.common.shell import get_shell_wrapper, open_shell, output_cd
from repotree.repos.discovery import LocalRepository, discover
from repotree.repos.match import find_matches, resolve_single, unique_subpaths
from repotree.repos.remote import (
    RemoteIdentity,
    is_valid,
    resolve_specifier,
    to_ssh,
)
from repotree.repos.sync import SyncOutcome, sync, sync_many


class AppState(NamedTuple):
    """Loaded once per invocation and handed to every command."""

    config: Config
    drivers: Mapping[VcsKind, VcsDriver]


def fail(msg: str) -> None:
    """Print an error and exit 1."""
    click.echo(style_error(msg), err=True)
    sys.exit(1)


@click.group()
@click.version_option(package_name="repotree")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Organize clones of remote repositories under configured roots.

    Repositories live at <root>/<host>/<owner>/<name>. Roots come from
    $REPOTREE_ROOT (separated by ':') or `git config repotree.root`,
    and the first root is where new clones go.

    EXAMPLES:
        rt get alice/foo              # Clone github.com/alice/foo
        rt get -u https://host/o/r    # Clone, or update if present
        rt list --unique              # Shortest unique names
        rt which foo                  # Full path of the 'foo' clone
        rt look foo                   # Shell inside the 'foo' clone
    """
    if ctx.obj is None:
        ctx.obj = AppState(config=load_config(), drivers=default_drivers())


def resolve_target(spec: str, default_host: str, *, ssh: bool) -> RemoteIdentity:
    """Resolve a specifier, rewriting it to SSH if asked."""
    identity = resolve_specifier(spec, default_host)
    if ssh:
        identity = to_ssh(identity)
    return identity


@cli.command()
@click.argument("specifiers", nargs=-1, required=True)
@click.option("--update", "-u", is_flag=True, help="Update if already cloned")
@click.option("--ssh", "-p", is_flag=True, help="Clone with SSH")
@click.option("--shallow", is_flag=True, help="Do a shallow clone")
@click.pass_obj
def get(
    state: AppState,
    specifiers: tuple[str, ...],
    *,
    update: bool,
    ssh: bool,
    shallow: bool,
) -> None:
    """Clone remote repositories, or update them with -u.

    SPECIFIER is a URL, git@host:owner/name, host/owner/name or owner/name.
    Already cloned repositories are left alone unless -u is given.

    EXAMPLES:
        rt get alice/foo
        rt get -p alice/foo                     # via ssh://git@github.com
        rt get --shallow https://gitlab.com/group/sub/repo
        rt get hg+https://hg.example.org/team/project
    """
    failed = False
    for spec in specifiers:
        try:
            identity = resolve_target(spec, state.config.default_host, ssh=ssh)
            if not is_valid(identity):
                raise UnknownVcs(identity.url)
            result = sync(
                identity,
                state.config.roots,
                state.drivers,
                update=update,
                shallow=shallow,
            )
        except RepoTreeError as e:
            click.echo(style_error(str(e)), err=True)
            failed = True
            continue

        if result.outcome is SyncOutcome.FAILED:
            click.echo(style_error(result.reason or "failed"), err=True)
            failed = True

    if failed:
        sys.exit(1)


@cli.command("list")
@click.argument("query", required=False, default="")
@click.option("--exact", "-e", is_flag=True, help="Perform an exact match")
@click.option("--full-path", "-p", is_flag=True, help="Print full paths")
@click.option("--unique", is_flag=True, help="Print shortest unique subpaths")
@click.option("--json", "-j", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def list_cmd(
    state: AppState,
    query: str,
    *,
    exact: bool,
    full_path: bool,
    unique: bool,
    as_json: bool,
) -> None:
    """List local repositories.

    With QUERY, only repositories whose path contains it are listed;
    -e requires QUERY to equal <name>, <owner>/<name> or the whole path.

    EXAMPLES:
        rt list                  # host/owner/name for every clone
        rt list -p dotfiles      # Full paths of clones matching 'dotfiles'
        rt list --unique         # foo, bob/foo, ...
    """
    repos = find_matches(
        discover(state.config.roots), query, exact=exact and bool(query)
    )

    if unique:
        pairs = unique_subpaths(repos, state.config.primary_root)
        lines = [name for _, name in pairs]
    elif full_path:
        lines = [str(repo.full_path) for repo in repos]
    else:
        lines = [repo.rel_path for repo in repos]

    if as_json:
        click.echo(json.dumps(lines, indent=2))
        return

    for line in lines:
        click.echo(line)


@cli.command()
@click.argument("name")
@click.pass_obj
def which(state: AppState, name: str) -> None:
    """Show the full path of a local repository.

    NAME is <name>, <owner>/<name> or <host>/<owner>/<name>.
    """
    try:
        repo = resolve_single(discover(state.config.roots), name)
    except RepoTreeError as e:
        fail(str(e))
        return
    click.echo(repo.full_path)


def format_repo_options(repos: list[LocalRepository]) -> list[str]:
    """Format repos for picker: relative path + root."""
    if not repos:
        return []
    width = max(len(r.rel_path) for r in repos)
    return [f"{r.rel_path.ljust(width)}  {r.root}" for r in repos]


@cli.command()
@click.argument("name", required=False)
@click.pass_obj
def look(state: AppState, name: str | None) -> None:
    """Open a shell inside a local repository.

    Without NAME, shows an interactive picker. With the shell wrapper from
    `rt shell-init` installed, the current shell changes directory instead.

    EXAMPLES:
        rt look foo
        rt look alice/foo
        rt look                  # Pick interactively
    """
    if name:
        try:
            repo = resolve_single(discover(state.config.roots), name)
        except RepoTreeError as e:
            fail(str(e))
            return
    else:
        repos = list(discover(state.config.roots))
        if not repos:
            fail("No repositories found")
            return
        index = fuzzy_select(format_repo_options(repos), "Select repository")
        if index is None:
            click.echo(style_dim("Cancelled."))
            return
        repo = repos[index]

    log("cd", str(repo.full_path))
    if output_cd(repo.full_path):
        return
    sys.exit(open_shell(repo.full_path))


@cli.command()
@click.option("--all", "show_all", is_flag=True, help="Print every root")
@click.pass_obj
def root(state: AppState, *, show_all: bool) -> None:
    """Print the primary root (where new clones go)."""
    roots = state.config.roots if show_all else state.config.roots[:1]
    for path in roots:
        click.echo(path)


@cli.command("shell-init")
@click.option(
    "--shell",
    type=click.Choice(["zsh", "bash"]),
    default="zsh",
    help="Shell type (default: zsh)",
)
def shell_init(shell: str) -> None:
    """Print a shell function that lets `rt look` change directory.

    EXAMPLES:
        eval "$(rt shell-init)"
        eval "$(rt shell-init --shell bash)"
    """
    click.echo(get_shell_wrapper("rt", shell))


@cli.group("import")
def import_group() -> None:
    """Get repositories in bulk from other sources."""


def _identities(
    specs: Iterable[str], default_host: str, *, ssh: bool
) -> Iterator[RemoteIdentity]:
    """Resolve specifiers one at a time, logging and skipping bad ones."""
    for spec in specs:
        try:
            identity = resolve_target(spec, default_host, ssh=ssh)
        except RepoTreeError as e:
            log("error", str(e))
            continue
        if not is_valid(identity):
            log("skip", f"Not a valid repository: {identity.url}")
            continue
        yield identity


def run_import(
    state: AppState,
    specs: Iterable[str],
    *,
    update: bool,
    ssh: bool,
    shallow: bool,
) -> None:
    """Sync every specifier in turn and print a summary."""
    identities = _identities(specs, state.config.default_host, ssh=ssh)
    results = sync_many(
        identities,
        state.config.roots,
        state.drivers,
        update=update,
        shallow=shallow,
    )

    counts = {outcome: 0 for outcome in SyncOutcome}
    for result in results:
        counts[result.outcome] += 1

    summary = ", ".join(
        f"{counts[outcome]} {outcome.value}" for outcome in SyncOutcome
    )
    if counts[SyncOutcome.FAILED]:
        click.echo(style_warn(summary), err=True)
        sys.exit(1)
    click.echo(style_success(summary), err=True)


@import_group.command()
@click.argument("user")
@click.option("--update", "-u", is_flag=True, help="Update if already cloned")
@click.option("--ssh", "-p", is_flag=True, help="Clone with SSH")
@click.option("--shallow", is_flag=True, help="Do a shallow clone")
@click.pass_obj
def starred(
    state: AppState, user: str, *, update: bool, ssh: bool, shallow: bool
) -> None:
    """Get every repository starred by a GitHub USER.

    Uses the gh CLI; $REPOTREE_GITHUB_TOKEN or `git config
    repotree.github.token` overrides its login.
    """
    log("import", f"Fetching repositories starred by {user}")
    urls = list_starred(user, token=state.config.github_token)
    if urls is None:
        fail(f"Could not list repositories starred by {user} (is gh installed?)")
        return
    log("import", f"{len(urls)} repositories")
    run_import(state, urls, update=update, ssh=ssh, shallow=shallow)


@import_group.command("file")
@click.argument("source", type=click.File("r"), default="-")
@click.option("--update", "-u", is_flag=True, help="Update if already cloned")
@click.option("--ssh", "-p", is_flag=True, help="Clone with SSH")
@click.option("--shallow", is_flag=True, help="Do a shallow clone")
@click.pass_obj
def import_file(
    state: AppState, source: TextIO, *, update: bool, ssh: bool, shallow: bool
) -> None:
    """Get every repository listed in SOURCE (default: stdin).

    One specifier per line; blank lines and lines starting with # are ignored.

    EXAMPLES:
        rt import file repos.txt
        gh repo list --json url -q '.[].url' | rt import file
    """
    specs = (
        line.strip()
        for line in source
        if line.strip() and not line.lstrip().startswith("#")
    )
    run_import(state, specs, update=update, ssh=ssh, shallow=shallow)


if __name__ == "__main__":
    cli()
