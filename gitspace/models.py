"""Value objects shared across the size analysis pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, ClassVar, Dict, Mapping, Tuple, Union

ParsedFields = Dict[str, int]


@dataclass(frozen=True)
class RepositoryHandle:
    """Root of a version-controlled working tree reported by the host."""

    root_path: str


@dataclass(frozen=True)
class RawProbeOutput:
    """Captured output of a single size probe invocation."""

    exit_code: int
    lines: Tuple[str, ...]
    stderr: str = ""


@dataclass(frozen=True)
class AnalysisResult:
    """Successful outcome of a repository size analysis.

    ``fields`` holds the parsed ``(name, value)`` pairs in output order;
    :attr:`field_values` gives a read-only mapping view of them.
    """

    repository_path: str
    total_bytes: int
    total_formatted: str
    raw_lines: Tuple[str, ...]
    fields: Tuple[Tuple[str, int], ...] = ()

    @property
    def field_values(self) -> Mapping[str, int]:
        return MappingProxyType(dict(self.fields))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "repository_path": self.repository_path,
            "total_bytes": self.total_bytes,
            "total_formatted": self.total_formatted,
            "raw_lines": list(self.raw_lines),
            "fields": dict(self.fields),
        }


@dataclass(frozen=True)
class AnalysisError:
    """Base for the typed failures an analysis can end in."""

    kind: ClassVar[str] = "error"

    @property
    def message(self) -> str:
        return "Analysis failed"

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.kind, "message": self.message}


@dataclass(frozen=True)
class NoRepositoryFound(AnalysisError):
    project_root: str = ""
    reason: str = ""

    kind: ClassVar[str] = "no_repository"

    @property
    def message(self) -> str:
        base = "No Git repository found"
        if self.project_root:
            base = f"{base} for {self.project_root}"
        return f"{base}: {self.reason}" if self.reason else base


@dataclass(frozen=True)
class ProbeFailed(AnalysisError):
    """The size command could not be spawned or exited non-zero.

    ``exit_code`` is ``-1`` when the process never produced an exit status
    (spawn failure or timeout).
    """

    exit_code: int
    stderr_snippet: str = ""

    kind: ClassVar[str] = "probe_failed"

    @property
    def message(self) -> str:
        if self.exit_code < 0:
            base = "Git command could not be run"
        else:
            base = f"Git command failed with exit code: {self.exit_code}"
        return f"{base} ({self.stderr_snippet})" if self.stderr_snippet else base

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload["exit_code"] = self.exit_code
        return payload


@dataclass(frozen=True)
class ParseFailed(AnalysisError):
    reason: str

    kind: ClassVar[str] = "parse_failed"

    @property
    def message(self) -> str:
        return f"Could not parse git output: {self.reason}"


@dataclass(frozen=True)
class Cancelled(AnalysisError):
    kind: ClassVar[str] = "cancelled"

    @property
    def message(self) -> str:
        return "Analysis cancelled"


AnalysisOutcome = Union[AnalysisResult, AnalysisError]


__all__ = [
    "AnalysisError",
    "AnalysisOutcome",
    "AnalysisResult",
    "Cancelled",
    "NoRepositoryFound",
    "ParseFailed",
    "ParsedFields",
    "ProbeFailed",
    "RawProbeOutput",
    "RepositoryHandle",
]
