"""Tests for text and JSON rendering."""

from __future__ import annotations

import json
from pathlib import Path

from gitspace.models import AnalysisResult, NoRepositoryFound, ProbeFailed
from gitspace.report import render_error, render_json, render_text


def _result() -> AnalysisResult:
    return AnalysisResult(
        repository_path="/work/repo",
        total_bytes=128000,
        total_formatted="125.00 KB",
        raw_lines=("size 50", "size-pack 75"),
        fields=(("size", 51200), ("size-pack", 76800)),
    )


def test_render_text_lists_repository_total_and_raw_output() -> None:
    assert render_text(_result()) == (
        "Repository: /work/repo\n"
        "Total size: 125.00 KB\n"
        "\n"
        "Raw git output:\n"
        "size 50\n"
        "size-pack 75\n"
    )


def test_render_text_prefers_custom_template(tmp_path: Path) -> None:
    (tmp_path / "report.j2").write_text("{{ result.total_bytes }} bytes\n", encoding="utf-8")

    assert render_text(_result(), templates_dir=tmp_path) == "128000 bytes\n"


def test_render_json_for_result() -> None:
    payload = json.loads(render_json(_result()))

    assert payload == {
        "repository_path": "/work/repo",
        "total_bytes": 128000,
        "total_formatted": "125.00 KB",
        "raw_lines": ["size 50", "size-pack 75"],
        "fields": {"size": 51200, "size-pack": 76800},
    }


def test_render_json_for_errors() -> None:
    payload = json.loads(render_json(ProbeFailed(exit_code=128)))

    assert payload == {
        "error": "probe_failed",
        "message": "Git command failed with exit code: 128",
        "exit_code": 128,
    }


def test_render_error_includes_kind() -> None:
    assert render_error(NoRepositoryFound()) == "error: no_repository: No Git repository found"
