"""Repository discovery for a project root."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable, Iterable, List, Sequence

from ..config import resolve_git_executable
from ..logging import get_logger
from ..models import NoRepositoryFound, RepositoryHandle

ListRepositories = Callable[[str], Sequence[RepositoryHandle]]


class RepositoryLocator:
    """Picks the repository to analyse from the host's repository list.

    The first entry wins, in the order the host supplies. That is a
    simplification: it is neither the nearest nor the most relevant
    repository when a project contains several.
    """

    def __init__(self, list_repositories: ListRepositories) -> None:
        self._list_repositories = list_repositories
        self.logger = get_logger("locator")

    def locate(self, project_root: str) -> RepositoryHandle | NoRepositoryFound:
        repositories = list(self._list_repositories(project_root))
        if not repositories:
            return NoRepositoryFound(project_root=project_root)
        if len(repositories) > 1:
            self.logger.debug(
                "Host reported %d repositories; using %s",
                len(repositories),
                repositories[0].root_path,
            )
        return repositories[0]


class GitRepositoryDiscovery:
    """Host capability that asks git for the enclosing working tree."""

    def __init__(
        self,
        runner: Callable[..., str] | None = None,
        *,
        git_executable: str | None = None,
    ) -> None:
        self._runner = runner or self._default_runner
        self._git = git_executable or resolve_git_executable()
        self.logger = get_logger("locator")

    def __call__(self, project_root: str) -> List[RepositoryHandle]:
        root = Path(project_root).expanduser()
        if not root.is_dir():
            self.logger.debug("Project root %s is not a directory", root)
            return []
        try:
            output = self._runner(
                [self._git, "rev-parse", "--show-toplevel"], cwd=root.resolve()
            )
        except (OSError, subprocess.CalledProcessError) as exc:
            self.logger.debug("git rev-parse failed in %s: %s", root, exc)
            return []
        toplevel = output.strip()
        if not toplevel:
            return []
        return [RepositoryHandle(root_path=str(Path(toplevel).resolve()))]

    @staticmethod
    def _default_runner(args: Iterable[str], *, cwd: Path) -> str:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=True,
            text=True,
            capture_output=True,
        )
        return completed.stdout


__all__ = ["GitRepositoryDiscovery", "ListRepositories", "RepositoryLocator"]
