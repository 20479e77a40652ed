"""Spawning of the size-reporting git command."""

from __future__ import annotations

import os
import signal
import subprocess
import threading
import time
from pathlib import Path
from typing import Callable, Optional, Sequence

from ..config import default_probe_command
from ..logging import get_logger
from ..models import Cancelled, ProbeFailed, RawProbeOutput

# How often a running probe checks its cancel event.
_POLL_INTERVAL = 0.1
_STDERR_LIMIT = 200
_POSIX = os.name == "posix"


class ProbeInterrupted(RuntimeError):
    """Base for probes stopped before the process exited on its own."""


class ProbeCancelled(ProbeInterrupted):
    pass


class ProbeTimeout(ProbeInterrupted):
    def __init__(self, timeout: float) -> None:
        super().__init__(f"timed out after {timeout:g}s")
        self.timeout = timeout


ProbeRunner = Callable[..., RawProbeOutput]


class SizeProbe:
    """Runs ``git count-objects -v`` (or a configured equivalent) in a repository."""

    def __init__(
        self,
        command: Sequence[str] | None = None,
        *,
        timeout: float | None = None,
        runner: ProbeRunner | None = None,
    ) -> None:
        self.command = list(command) if command else default_probe_command()
        self.timeout = timeout
        self._runner = runner or self._default_runner
        self.logger = get_logger("probe")

    def probe(
        self,
        repository_path: str,
        *,
        cancel_event: threading.Event | None = None,
    ) -> RawProbeOutput | ProbeFailed | Cancelled:
        cwd = Path(repository_path)
        self.logger.debug("Running %s in %s", " ".join(self.command), cwd)
        try:
            output = self._runner(
                self.command,
                cwd=cwd,
                cancel_event=cancel_event,
                timeout=self.timeout,
            )
        except ProbeCancelled:
            return Cancelled()
        except ProbeTimeout as exc:
            return ProbeFailed(exit_code=-1, stderr_snippet=str(exc))
        except OSError as exc:
            return ProbeFailed(exit_code=-1, stderr_snippet=_snippet(str(exc)))

        if output.exit_code != 0:
            return ProbeFailed(
                exit_code=output.exit_code,
                stderr_snippet=_snippet(output.stderr),
            )
        return output

    @staticmethod
    def _default_runner(
        args: Sequence[str],
        *,
        cwd: Path,
        cancel_event: threading.Event | None = None,
        timeout: float | None = None,
    ) -> RawProbeOutput:
        with subprocess.Popen(
            list(args),
            cwd=str(cwd),
            stdin=subprocess.DEVNULL,
            start_new_session=_POSIX,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
        ) as process:
            stdout, stderr = _communicate(process, cancel_event, timeout)
        return RawProbeOutput(
            exit_code=process.returncode,
            lines=tuple(stdout.splitlines()),
            stderr=stderr,
        )


def _communicate(
    process: subprocess.Popen,
    cancel_event: Optional[threading.Event],
    timeout: Optional[float],
) -> tuple[str, str]:
    if cancel_event is None and timeout is None:
        return process.communicate()

    deadline = None if timeout is None else time.monotonic() + timeout
    while True:
        if cancel_event is not None and cancel_event.is_set():
            _kill(process)
            raise ProbeCancelled("probe cancelled")
        wait = _POLL_INTERVAL
        if deadline is not None:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                _kill(process)
                raise ProbeTimeout(timeout)  # type: ignore[arg-type]
            wait = min(wait, remaining)
        try:
            return process.communicate(timeout=wait)
        except subprocess.TimeoutExpired:
            continue


def _kill(process: subprocess.Popen) -> None:
    """Kill the probe and anything it spawned, then reap it.

    On POSIX the probe leads its own session, so the whole group goes down and
    no grandchild keeps the output pipes open. The pipes are closed by the
    surrounding ``Popen`` context rather than drained.
    """
    if _POSIX:
        try:
            os.killpg(process.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass
    else:
        process.kill()
    process.wait()


def _snippet(text: str) -> str:
    cleaned = " ".join(text.strip().split())
    if len(cleaned) > _STDERR_LIMIT:
        return cleaned[:_STDERR_LIMIT] + "…"
    return cleaned


__all__ = [
    "ProbeCancelled",
    "ProbeInterrupted",
    "ProbeRunner",
    "ProbeTimeout",
    "SizeProbe",
]
