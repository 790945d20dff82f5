"""Tests for the rt command line."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from repotree.cli import AppState, cli
from repotree.common.config import Config
from repotree.common.vcs import VcsKind


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def state(roots: tuple[Path, Path], drivers: dict[VcsKind, Any]) -> AppState:
    return AppState(config=Config(roots=roots), drivers=drivers)


@pytest.fixture
def populated(
    roots: tuple[Path, Path], make_repo: Callable[..., Path]
) -> tuple[Path, Path]:
    """Scenario with a same-named repo in each root plus a duplicate."""
    r1, r2 = roots
    make_repo(r1, "github.com/alice/foo")
    make_repo(r1, "github.com/alice/foobar")
    make_repo(r2, "github.com/bob/foo")
    make_repo(r2, "github.com/alice/foobar")
    return roots


class TestList:
    """Tests for rt list."""

    def test_lists_relative_paths(
        self, runner: CliRunner, state: AppState, populated: tuple[Path, Path]
    ) -> None:
        result = runner.invoke(cli, ["list"], obj=state)

        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "github.com/alice/foo",
            "github.com/alice/foobar",
            "github.com/alice/foobar",
            "github.com/bob/foo",
        ]

    def test_query_and_exact(
        self, runner: CliRunner, state: AppState, populated: tuple[Path, Path]
    ) -> None:
        substring = runner.invoke(cli, ["list", "alice/foo"], obj=state)
        exact = runner.invoke(cli, ["list", "-e", "alice/foo"], obj=state)

        assert substring.output.splitlines() == [
            "github.com/alice/foo",
            "github.com/alice/foobar",
            "github.com/alice/foobar",
        ]
        assert exact.output.splitlines() == ["github.com/alice/foo"]

    def test_exact_without_query_lists_everything(
        self, runner: CliRunner, state: AppState, populated: tuple[Path, Path]
    ) -> None:
        result = runner.invoke(cli, ["list", "-e"], obj=state)
        assert len(result.output.splitlines()) == 4

    def test_full_paths(
        self, runner: CliRunner, state: AppState, populated: tuple[Path, Path]
    ) -> None:
        r1, _ = populated
        result = runner.invoke(cli, ["list", "-p", "-e", "alice/foo"], obj=state)

        assert result.output.splitlines() == [str(r1 / "github.com" / "alice" / "foo")]

    def test_unique(
        self, runner: CliRunner, state: AppState, populated: tuple[Path, Path]
    ) -> None:
        result = runner.invoke(cli, ["list", "--unique"], obj=state)

        assert result.exit_code == 0
        assert result.output.splitlines() == ["alice/foo", "foobar", "bob/foo"]

    def test_unique_single_repo(
        self,
        runner: CliRunner,
        state: AppState,
        roots: tuple[Path, Path],
        make_repo: Callable[..., Path],
    ) -> None:
        make_repo(roots[0], "github.com/alice/foo")

        result = runner.invoke(cli, ["list", "--unique"], obj=state)

        assert result.output.splitlines() == ["foo"]

    def test_json(
        self, runner: CliRunner, state: AppState, populated: tuple[Path, Path]
    ) -> None:
        result = runner.invoke(cli, ["list", "--json", "-e", "bob/foo"], obj=state)

        assert json.loads(result.output) == ["github.com/bob/foo"]


class TestWhich:
    """Tests for rt which."""

    def test_prints_full_path(
        self, runner: CliRunner, state: AppState, populated: tuple[Path, Path]
    ) -> None:
        _, r2 = populated
        result = runner.invoke(cli, ["which", "bob/foo"], obj=state)

        assert result.exit_code == 0
        assert result.output.strip() == str(r2 / "github.com" / "bob" / "foo")

    def test_ambiguous(
        self, runner: CliRunner, state: AppState, populated: tuple[Path, Path]
    ) -> None:
        result = runner.invoke(cli, ["which", "foo"], obj=state)

        assert result.exit_code == 1
        assert "More than one repository" in result.output
        assert "github.com/alice/foo" in result.output
        assert "github.com/bob/foo" in result.output

    def test_not_found(
        self, runner: CliRunner, state: AppState, populated: tuple[Path, Path]
    ) -> None:
        result = runner.invoke(cli, ["which", "nothing"], obj=state)

        assert result.exit_code == 1
        assert "No repository found" in result.output


class TestGet:
    """Tests for rt get."""

    def test_clones(
        self,
        runner: CliRunner,
        state: AppState,
        roots: tuple[Path, Path],
        drivers: dict[VcsKind, Any],
    ) -> None:
        result = runner.invoke(cli, ["get", "--shallow", "alice/foo"], obj=state)

        assert result.exit_code == 0
        assert drivers[VcsKind.GIT].calls == [
            (
                "clone",
                "https://github.com/alice/foo",
                roots[0] / "github.com" / "alice" / "foo",
                True,
            )
        ]

    def test_ssh(
        self, runner: CliRunner, state: AppState, drivers: dict[VcsKind, Any]
    ) -> None:
        result = runner.invoke(cli, ["get", "-p", "alice/foo"], obj=state)

        assert result.exit_code == 0
        assert drivers[VcsKind.GIT].calls[0][1] == "ssh://git@github.com/alice/foo"

    def test_existing_without_update(
        self,
        runner: CliRunner,
        state: AppState,
        populated: tuple[Path, Path],
        drivers: dict[VcsKind, Any],
    ) -> None:
        result = runner.invoke(cli, ["get", "alice/foo"], obj=state)

        assert result.exit_code == 0
        assert drivers[VcsKind.GIT].calls == []

    def test_existing_with_update(
        self,
        runner: CliRunner,
        state: AppState,
        populated: tuple[Path, Path],
        drivers: dict[VcsKind, Any],
    ) -> None:
        r1, _ = populated
        result = runner.invoke(cli, ["get", "-u", "alice/foo"], obj=state)

        assert result.exit_code == 0
        assert drivers[VcsKind.GIT].calls == [
            ("update", r1 / "github.com" / "alice" / "foo")
        ]

    def test_invalid_specifier_fails(
        self, runner: CliRunner, state: AppState, drivers: dict[VcsKind, Any]
    ) -> None:
        result = runner.invoke(cli, ["get", "foo", "alice/bar"], obj=state)

        assert result.exit_code == 1
        assert "Ambiguous repository" in result.output
        # The valid target still ran
        assert len(drivers[VcsKind.GIT].calls) == 1

    def test_not_a_repository(
        self, runner: CliRunner, state: AppState, drivers: dict[VcsKind, Any]
    ) -> None:
        result = runner.invoke(
            cli, ["get", "https://github.com/alice/foo/pulls"], obj=state
        )

        assert result.exit_code == 1
        assert "Not a valid repository" in result.output
        assert drivers[VcsKind.GIT].calls == []

    def test_driver_failure_exit_code(
        self,
        runner: CliRunner,
        roots: tuple[Path, Path],
        failing_drivers: dict[VcsKind, Any],
    ) -> None:
        state = AppState(config=Config(roots=roots), drivers=failing_drivers)

        result = runner.invoke(cli, ["get", "alice/foo"], obj=state)

        assert result.exit_code == 1
        assert "exit status 128" in result.output


class TestLook:
    """Tests for rt look."""

    def test_writes_cd_file_with_wrapper(
        self,
        runner: CliRunner,
        state: AppState,
        populated: tuple[Path, Path],
        tmp_path: Path,
    ) -> None:
        r1, _ = populated
        cd_file = tmp_path / "cd"

        result = runner.invoke(
            cli,
            ["look", "alice/foo"],
            obj=state,
            env={"REPOTREE_CD_FILE": str(cd_file)},
        )

        assert result.exit_code == 0
        assert cd_file.read_text() == str(r1 / "github.com" / "alice" / "foo")

    def test_spawns_shell_without_wrapper(
        self,
        runner: CliRunner,
        state: AppState,
        populated: tuple[Path, Path],
        mocker: Any,
    ) -> None:
        _, r2 = populated
        open_shell = mocker.patch("repotree.cli.open_shell", return_value=0)

        result = runner.invoke(
            cli, ["look", "bob/foo"], obj=state, env={"REPOTREE_CD_FILE": None}
        )

        assert result.exit_code == 0
        open_shell.assert_called_once_with(r2 / "github.com" / "bob" / "foo")

    def test_interactive_picker(
        self,
        runner: CliRunner,
        state: AppState,
        populated: tuple[Path, Path],
        mocker: Any,
    ) -> None:
        _, r2 = populated
        picker = mocker.patch("repotree.cli.fuzzy_select", return_value=3)
        open_shell = mocker.patch("repotree.cli.open_shell", return_value=0)

        result = runner.invoke(
            cli, ["look"], obj=state, env={"REPOTREE_CD_FILE": None}
        )

        assert result.exit_code == 0
        assert len(picker.call_args.args[0]) == 4
        open_shell.assert_called_once_with(r2 / "github.com" / "bob" / "foo")

    def test_picker_cancelled(
        self,
        runner: CliRunner,
        state: AppState,
        populated: tuple[Path, Path],
        mocker: Any,
    ) -> None:
        mocker.patch("repotree.cli.fuzzy_select", return_value=None)
        open_shell = mocker.patch("repotree.cli.open_shell")

        result = runner.invoke(cli, ["look"], obj=state)

        assert result.exit_code == 0
        assert "Cancelled" in result.output
        open_shell.assert_not_called()

    def test_ambiguous(
        self, runner: CliRunner, state: AppState, populated: tuple[Path, Path]
    ) -> None:
        result = runner.invoke(cli, ["look", "foo"], obj=state)
        assert result.exit_code == 1


class TestRoot:
    """Tests for rt root."""

    def test_primary(
        self, runner: CliRunner, state: AppState, roots: tuple[Path, Path]
    ) -> None:
        result = runner.invoke(cli, ["root"], obj=state)
        assert result.output.splitlines() == [str(roots[0])]

    def test_all(
        self, runner: CliRunner, state: AppState, roots: tuple[Path, Path]
    ) -> None:
        result = runner.invoke(cli, ["root", "--all"], obj=state)
        assert result.output.splitlines() == [str(r) for r in roots]


class TestImport:
    """Tests for rt import."""

    def test_file_from_stdin(
        self, runner: CliRunner, state: AppState, drivers: dict[VcsKind, Any]
    ) -> None:
        source = "\n".join(
            [
                "# my repositories",
                "alice/foo",
                "",
                "https://github.com/alice/foo/issues",
                "nonsense",
                "  https://hg.example.org/team/tool  ",
            ]
        )

        result = runner.invoke(cli, ["import", "file"], obj=state, input=source)

        assert result.exit_code == 0
        assert [c[1] for c in drivers[VcsKind.GIT].calls] == [
            "https://github.com/alice/foo"
        ]
        assert [c[1] for c in drivers[VcsKind.MERCURIAL].calls] == [
            "https://hg.example.org/team/tool"
        ]
        assert "Not a valid repository" in result.output

    def test_file_failures_exit_non_zero(
        self,
        runner: CliRunner,
        roots: tuple[Path, Path],
        failing_drivers: dict[VcsKind, Any],
        tmp_path: Path,
    ) -> None:
        listing = tmp_path / "repos.txt"
        listing.write_text("alice/a\nalice/b\n")
        state = AppState(config=Config(roots=roots), drivers=failing_drivers)

        result = runner.invoke(cli, ["import", "file", str(listing)], obj=state)

        assert result.exit_code == 1
        assert len(failing_drivers[VcsKind.GIT].calls) == 2

    def test_starred(
        self,
        runner: CliRunner,
        roots: tuple[Path, Path],
        drivers: dict[VcsKind, Any],
        mocker: Any,
    ) -> None:
        list_starred = mocker.patch(
            "repotree.cli.list_starred",
            return_value=[
                "https://github.com/alice/foo",
                "https://github.com/bob/bar",
            ],
        )
        state = AppState(
            config=Config(roots=roots, github_token="tok"), drivers=drivers
        )

        result = runner.invoke(cli, ["import", "starred", "-p", "carol"], obj=state)

        assert result.exit_code == 0
        list_starred.assert_called_once_with("carol", token="tok")
        assert [c[1] for c in drivers[VcsKind.GIT].calls] == [
            "ssh://git@github.com/alice/foo",
            "ssh://git@github.com/bob/bar",
        ]

    def test_starred_api_failure(
        self, runner: CliRunner, state: AppState, mocker: Any
    ) -> None:
        mocker.patch("repotree.cli.list_starred", return_value=None)

        result = runner.invoke(cli, ["import", "starred", "carol"], obj=state)

        assert result.exit_code == 1
        assert "Could not list" in result.output


class TestShellInit:
    """Tests for rt shell-init."""

    @pytest.mark.parametrize("shell", ["zsh", "bash"])
    def test_prints_wrapper(self, runner: CliRunner, shell: str) -> None:
        result = runner.invoke(cli, ["shell-init", "--shell", shell], obj=object())

        assert result.exit_code == 0
        assert "rt() {" in result.output
        assert "REPOTREE_CD_FILE" in result.output
