"""CLI entrypoints for gitspace commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import OUTPUT_FORMATS, ConfigError, load_config
from .logging import configure_logging
from .models import AnalysisError
from .pipeline import AnalysisPipeline
from .report import render_error, render_json, render_text


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _positive_float(value: str) -> float:
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("timeout must be greater than zero")
    return parsed


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gitspace",
        description="Report how much disk space a Git repository's objects use.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write DEBUG logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Sum loose-object and pack sizes reported by `git count-objects -v`.",
    )
    _add_verbose_option(analyze_parser, suppress_default=True)
    analyze_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path inside the repository (defaults to current directory).",
    )
    analyze_parser.add_argument(
        "--format",
        dest="output_format",
        choices=OUTPUT_FORMATS,
        default=None,
        help="Output format: human-readable text or JSON (defaults to text).",
    )
    analyze_parser.add_argument(
        "--timeout",
        type=_positive_float,
        default=None,
        help="Kill the git command after this many seconds.",
    )
    analyze_parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Fail when git reports none of the size fields instead of a zero total.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for gitspace commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    if args.command != "analyze":  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")

    try:
        config = load_config(Path(args.path))
    except ConfigError as exc:
        parser.exit(1, f"gitspace analyze failed: {exc}\n")

    if args.timeout is not None:
        config.probe.timeout = args.timeout
    if args.strict is not None:
        config.parser.strict = args.strict
    output_format = args.output_format or config.output_format

    pipeline = AnalysisPipeline.from_config(config)
    outcome = pipeline.analyze(str(Path(args.path).expanduser()))

    if isinstance(outcome, AnalysisError):
        if output_format == "json":
            print(render_json(outcome))
        parser.exit(1, render_error(outcome) + "\n")

    if output_format == "json":
        print(render_json(outcome))
    else:
        sys.stdout.write(render_text(outcome))


if __name__ == "__main__":
    main(sys.argv[1:])
