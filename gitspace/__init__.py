"""gitspace: repository size analysis built on `git count-objects -v`."""

from .formatting import format_bytes
from .models import (
    AnalysisError,
    AnalysisResult,
    Cancelled,
    NoRepositoryFound,
    ParseFailed,
    ProbeFailed,
    RawProbeOutput,
    RepositoryHandle,
)
from .parser import OutputParser, aggregate_size, parse_count_objects
from .pipeline import AnalysisPipeline, AnalysisRun, PipelineState

__all__ = [
    "AnalysisError",
    "AnalysisPipeline",
    "AnalysisResult",
    "AnalysisRun",
    "Cancelled",
    "NoRepositoryFound",
    "OutputParser",
    "ParseFailed",
    "PipelineState",
    "ProbeFailed",
    "RawProbeOutput",
    "RepositoryHandle",
    "aggregate_size",
    "format_bytes",
    "parse_count_objects",
]
