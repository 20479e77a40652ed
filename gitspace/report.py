"""Rendering of analysis outcomes for terminal and machine consumers."""

from __future__ import annotations

import json
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from .models import AnalysisError, AnalysisOutcome, AnalysisResult

_TEMPLATES_DIR = Path(__file__).with_name("templates")


def _create_env(templates_dir: Path | None = None) -> Environment:
    directories = []
    if templates_dir:
        directories.append(str(templates_dir))
    directories.append(str(_TEMPLATES_DIR))
    loader = FileSystemLoader(directories)
    return Environment(
        loader=loader,
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def render_text(result: AnalysisResult, *, templates_dir: Path | None = None) -> str:
    """Render the repository, total size and raw git output as plain text."""
    template = _create_env(templates_dir).get_template("report.j2")
    return template.render(result=result)


def render_json(outcome: AnalysisOutcome) -> str:
    """Serialise a result or an error as a JSON document."""
    return json.dumps(outcome.to_dict(), indent=2, sort_keys=True)


def render_error(error: AnalysisError) -> str:
    return f"error: {error.kind}: {error.message}"


__all__ = ["render_error", "render_json", "render_text"]
