from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tests._fixtures.fakes import StaticRepositories


@pytest.fixture
def repo_root(tmp_path: Path) -> Path:
    """A directory standing in for a repository root reported by the host."""
    root = tmp_path / "repo"
    root.mkdir()
    return root


@pytest.fixture
def repositories(repo_root: Path) -> StaticRepositories:
    return StaticRepositories([repo_root])


@pytest.fixture(autouse=True)
def _reset_gitspace_logger():  # type: ignore[no-untyped-def]
    """Drop handlers bound to a previous test's captured streams."""
    yield
    logger = logging.getLogger("gitspace")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
