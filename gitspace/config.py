"""Configuration loading for gitspace (.gitspace.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".gitspace.yml"
GIT_ENV_KEY = "GITSPACE_GIT"
OUTPUT_FORMATS = ("text", "json")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


def resolve_git_executable() -> str:
    """Return the git binary to invoke, honouring ``GITSPACE_GIT``."""
    value = os.getenv(GIT_ENV_KEY, "").strip()
    return value or "git"


def default_probe_command() -> List[str]:
    return [resolve_git_executable(), "count-objects", "-v"]


@dataclass
class ProbeConfig:
    """How the size command is spawned."""

    command: List[str] = field(default_factory=default_probe_command)
    timeout: Optional[float] = None


@dataclass
class ParserConfig:
    """Parser leniency."""

    strict: bool = False


@dataclass
class GitSpaceConfig:
    """Represents the settings defined in .gitspace.yml."""

    root: Path
    probe: ProbeConfig = field(default_factory=ProbeConfig)
    parser: ParserConfig = field(default_factory=ParserConfig)
    output_format: str = "text"


def load_config(config_path: Path) -> GitSpaceConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return GitSpaceConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    probe = ProbeConfig()
    probe_data = _as_dict(data.get("probe"))
    if probe_data:
        command = _as_str_list(probe_data.get("command"))
        if command:
            probe.command = command
        timeout = _as_float(probe_data.get("timeout"))
        if timeout is not None:
            if timeout <= 0:
                raise ConfigError("probe.timeout must be a positive number of seconds")
            probe.timeout = timeout

    parser = ParserConfig()
    parser_data = _as_dict(data.get("parser"))
    if parser_data:
        parser.strict = _as_bool(parser_data.get("strict")) or False

    output_format = "text"
    output_data = _as_dict(data.get("output"))
    if output_data:
        fmt = _as_str(output_data.get("format"))
        if fmt is not None:
            if fmt not in OUTPUT_FORMATS:
                raise ConfigError(
                    f"output.format must be one of {', '.join(OUTPUT_FORMATS)}, got {fmt!r}"
                )
            output_format = fmt

    return GitSpaceConfig(
        root=root,
        probe=probe,
        parser=parser,
        output_format=output_format,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "GitSpaceConfig",
    "OUTPUT_FORMATS",
    "ParserConfig",
    "ProbeConfig",
    "default_probe_command",
    "load_config",
    "resolve_git_executable",
]
