"""Tests for repository discovery."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from gitspace.git.locator import GitRepositoryDiscovery, RepositoryLocator
from gitspace.models import NoRepositoryFound, RepositoryHandle
from tests._fixtures.fakes import StaticRepositories


def test_locator_returns_first_repository_in_host_order(tmp_path: Path) -> None:
    host = StaticRepositories([tmp_path / "b", tmp_path / "a"])

    handle = RepositoryLocator(host).locate(str(tmp_path))

    assert handle == RepositoryHandle(root_path=str(tmp_path / "b"))
    assert host.calls == [str(tmp_path)]


def test_locator_reports_missing_repository(tmp_path: Path) -> None:
    result = RepositoryLocator(StaticRepositories()).locate(str(tmp_path))

    assert isinstance(result, NoRepositoryFound)
    assert result.project_root == str(tmp_path)
    assert result.kind == "no_repository"


def test_discovery_uses_git_toplevel(repo_root: Path) -> None:
    calls: list[tuple[list[str], Path]] = []

    def runner(args, cwd):  # type: ignore[no-untyped-def]
        calls.append((list(args), Path(cwd)))
        return f"{repo_root}\n"

    discovery = GitRepositoryDiscovery(runner=runner, git_executable="git")
    nested = repo_root / "src"
    nested.mkdir()

    handles = discovery(str(nested))

    assert handles == [RepositoryHandle(root_path=str(repo_root.resolve()))]
    assert calls == [(["git", "rev-parse", "--show-toplevel"], nested.resolve())]


def test_discovery_returns_nothing_outside_a_repository(tmp_path: Path) -> None:
    def runner(args, cwd):  # type: ignore[no-untyped-def]
        raise subprocess.CalledProcessError(128, list(args))

    assert GitRepositoryDiscovery(runner=runner)(str(tmp_path)) == []


def test_discovery_returns_nothing_when_git_is_missing(tmp_path: Path) -> None:
    def runner(args, cwd):  # type: ignore[no-untyped-def]
        raise FileNotFoundError("git")

    assert GitRepositoryDiscovery(runner=runner)(str(tmp_path)) == []


def test_discovery_skips_nonexistent_project_root(tmp_path: Path) -> None:
    def runner(args, cwd):  # type: ignore[no-untyped-def]
        raise AssertionError("git must not run for a missing directory")

    assert GitRepositoryDiscovery(runner=runner)(str(tmp_path / "missing")) == []


@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
def test_discovery_against_real_repository(tmp_path: Path) -> None:
    repo = tmp_path / "real"
    repo.mkdir()
    subprocess.run(["git", "init", "-q", str(repo)], check=True)
    (repo / "pkg").mkdir()

    handles = GitRepositoryDiscovery(git_executable="git")(str(repo / "pkg"))

    assert handles == [RepositoryHandle(root_path=str(repo.resolve()))]
