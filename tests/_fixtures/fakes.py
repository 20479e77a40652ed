"""Stand-ins for the host and the git subprocess used across tests."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Iterable, List, Sequence

from gitspace.models import RawProbeOutput, RepositoryHandle


class StaticRepositories:
    """Host capability returning a fixed repository list and recording calls."""

    def __init__(self, roots: Iterable[str | Path] = ()) -> None:
        self.handles = [RepositoryHandle(root_path=str(root)) for root in roots]
        self.calls: List[str] = []

    def __call__(self, project_root: str) -> Sequence[RepositoryHandle]:
        self.calls.append(project_root)
        return list(self.handles)


class FakeProbeRunner:
    """Replaces the subprocess spawn of :class:`gitspace.git.probe.SizeProbe`."""

    def __init__(
        self,
        lines: Sequence[str] = (),
        *,
        exit_code: int = 0,
        stderr: str = "",
        error: BaseException | None = None,
    ) -> None:
        self.lines = tuple(lines)
        self.exit_code = exit_code
        self.stderr = stderr
        self.error = error
        self.calls: List[dict[str, object]] = []

    def __call__(
        self,
        args: Sequence[str],
        *,
        cwd: Path,
        cancel_event: threading.Event | None = None,
        timeout: float | None = None,
    ) -> RawProbeOutput:
        self.calls.append(
            {"args": list(args), "cwd": Path(cwd), "cancel_event": cancel_event, "timeout": timeout}
        )
        if self.error is not None:
            raise self.error
        return RawProbeOutput(exit_code=self.exit_code, lines=self.lines, stderr=self.stderr)


# Verbatim `git count-objects -v` output for a small repository.
COUNT_OBJECTS_OUTPUT = (
    "count 10",
    "size 50",
    "in-pack 5",
    "packs 1",
    "size-pack 75",
    "prune-packable 0",
    "garbage 0",
    "size-garbage 0",
)

__all__ = ["COUNT_OBJECTS_OUTPUT", "FakeProbeRunner", "StaticRepositories"]
