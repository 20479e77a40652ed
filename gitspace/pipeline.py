"""Repository size analysis pipeline: locate, probe, parse, aggregate, format."""

from __future__ import annotations

import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .config import GitSpaceConfig
from .formatting import format_bytes
from .git.locator import GitRepositoryDiscovery, ListRepositories, RepositoryLocator
from .git.probe import SizeProbe
from .logging import get_logger
from .models import (
    AnalysisError,
    AnalysisOutcome,
    AnalysisResult,
    Cancelled,
    NoRepositoryFound,
    ParseFailed,
    ProbeFailed,
    RawProbeOutput,
)
from .parser import OutputParseError, OutputParser, aggregate_size


class PipelineState(str, Enum):
    IDLE = "idle"
    LOCATING = "locating"
    PROBING = "probing"
    PARSING = "parsing"
    AGGREGATING = "aggregating"
    FORMATTING = "formatting"
    DONE = "done"
    FAILED = "failed"


@dataclass
class AnalysisRun:
    """Trail of a single analysis call: visited states and the final outcome."""

    project_root: str
    states: List[PipelineState] = field(default_factory=lambda: [PipelineState.IDLE])
    outcome: Optional[AnalysisOutcome] = None

    @property
    def state(self) -> PipelineState:
        return self.states[-1]

    @property
    def succeeded(self) -> bool:
        return isinstance(self.outcome, AnalysisResult)


class AnalysisPipeline:
    """Coordinates one repository size analysis per call.

    Steps run strictly in order and are never retried. Every failure ends the
    run in ``FAILED`` with an :class:`AnalysisError` value; nothing is raised
    to the caller. The pipeline keeps no state between calls, so concurrent
    analyses (even of the same repository) are independent.
    """

    def __init__(
        self,
        locator: RepositoryLocator | None = None,
        probe: SizeProbe | None = None,
        parser: OutputParser | None = None,
        *,
        list_repositories: ListRepositories | None = None,
    ) -> None:
        self.locator = locator or RepositoryLocator(
            list_repositories or GitRepositoryDiscovery()
        )
        self.probe = probe or SizeProbe()
        self.parser = parser or OutputParser()
        self.logger = get_logger("pipeline")

    @classmethod
    def from_config(
        cls,
        config: GitSpaceConfig,
        *,
        list_repositories: ListRepositories | None = None,
    ) -> AnalysisPipeline:
        return cls(
            probe=SizeProbe(config.probe.command, timeout=config.probe.timeout),
            parser=OutputParser(strict=config.parser.strict),
            list_repositories=list_repositories,
        )

    def analyze(
        self,
        project_root: str,
        *,
        cancel_event: threading.Event | None = None,
    ) -> AnalysisOutcome:
        """Analyse the first repository of ``project_root`` and return the outcome."""
        return self._execute(AnalysisRun(project_root=project_root), cancel_event)

    def submit(
        self,
        project_root: str,
        *,
        executor: Executor | None = None,
        cancel_event: threading.Event | None = None,
    ) -> Future[AnalysisOutcome]:
        """Run :meth:`analyze` on a worker thread.

        The caller decides how to bring the result back onto its own thread.
        Without an executor a single-use worker is started for this call.
        """
        if executor is not None:
            return executor.submit(self.analyze, project_root, cancel_event=cancel_event)
        worker = ThreadPoolExecutor(max_workers=1, thread_name_prefix="gitspace")
        try:
            return worker.submit(self.analyze, project_root, cancel_event=cancel_event)
        finally:
            worker.shutdown(wait=False)

    def run(
        self,
        project_root: str,
        *,
        cancel_event: threading.Event | None = None,
    ) -> AnalysisRun:
        """Execute the pipeline and return the full run record."""
        run = AnalysisRun(project_root=project_root)
        self._execute(run, cancel_event)
        return run

    def _execute(
        self, run: AnalysisRun, cancel_event: threading.Event | None
    ) -> AnalysisOutcome:
        project_root = run.project_root
        self.logger.info("Starting size analysis for %s", project_root)

        self._enter(run, PipelineState.LOCATING)
        try:
            located = self.locator.locate(project_root)
        except Exception as exc:
            self.logger.warning("Repository discovery raised: %s", exc)
            located = NoRepositoryFound(project_root=project_root, reason=str(exc))
        if isinstance(located, AnalysisError):
            return self._fail(run, located)
        repository_path = located.root_path

        if cancel_event is not None and cancel_event.is_set():
            return self._fail(run, Cancelled())

        self._enter(run, PipelineState.PROBING)
        try:
            probed = self.probe.probe(repository_path, cancel_event=cancel_event)
        except Exception as exc:
            self.logger.warning("Size probe raised: %s", exc)
            probed = ProbeFailed(exit_code=-1, stderr_snippet=str(exc))
        if isinstance(probed, AnalysisError):
            return self._fail(run, probed)
        raw: RawProbeOutput = probed

        self._enter(run, PipelineState.PARSING)
        try:
            fields = self.parser.parse(raw.lines)
        except OutputParseError as exc:
            return self._fail(run, ParseFailed(reason=str(exc)))
        except Exception as exc:
            self.logger.warning("Output parser raised: %s", exc)
            return self._fail(run, ParseFailed(reason=str(exc)))

        self._enter(run, PipelineState.AGGREGATING)
        try:
            total_bytes = aggregate_size(fields)
        except Exception as exc:
            self.logger.warning("Size aggregation raised: %s", exc)
            return self._fail(run, ParseFailed(reason=str(exc)))

        self._enter(run, PipelineState.FORMATTING)
        try:
            formatted = format_bytes(total_bytes)
        except Exception as exc:
            self.logger.warning("Size formatting raised: %s", exc)
            return self._fail(run, ParseFailed(reason=str(exc)))

        result = AnalysisResult(
            repository_path=repository_path,
            total_bytes=total_bytes,
            total_formatted=formatted,
            raw_lines=raw.lines,
            fields=tuple(fields.items()),
        )
        run.outcome = result
        self._enter(run, PipelineState.DONE)
        self.logger.info("Repository %s uses %s", repository_path, formatted)
        return result

    def _enter(self, run: AnalysisRun, state: PipelineState) -> None:
        self.logger.debug("%s -> %s", run.state.value, state.value)
        run.states.append(state)

    def _fail(self, run: AnalysisRun, error: AnalysisError) -> AnalysisError:
        self._enter(run, PipelineState.FAILED)
        run.outcome = error
        self.logger.warning("Size analysis failed (%s): %s", error.kind, error.message)
        return error


__all__ = ["AnalysisPipeline", "AnalysisRun", "PipelineState"]
