"""Parsing and aggregation of ``git count-objects -v`` output."""

from __future__ import annotations

import re
from typing import Iterable, Mapping, Sequence

from .models import ParsedFields

# Fields reported by git in KiB; everything else is a plain count.
KIB_FIELDS: Sequence[str] = ("size", "size-pack")

_LINE_PATTERN = re.compile(r"^([A-Za-z][A-Za-z0-9-]*)\s+(\d+)$")
_KIB = 1024


class OutputParseError(ValueError):
    """Raised by strict parsing when the output carries no size fields."""


class OutputParser:
    """Turns ``key value`` lines into a field mapping with sizes in bytes.

    Malformed lines are skipped. In strict mode an output with none of the
    size fields is rejected, since that usually means the command's output
    format is not the one expected.
    """

    def __init__(self, *, strict: bool = False) -> None:
        self.strict = strict

    def parse(self, lines: Iterable[str]) -> ParsedFields:
        fields: ParsedFields = {}
        for line in lines:
            match = _LINE_PATTERN.match(line.strip())
            if not match:
                continue
            name, raw_value = match.groups()
            value = int(raw_value)
            if name in KIB_FIELDS:
                value *= _KIB
            fields[name] = value

        if self.strict and not any(name in fields for name in KIB_FIELDS):
            expected = ", ".join(KIB_FIELDS)
            raise OutputParseError(f"none of the expected fields ({expected}) were reported")
        return fields


def parse_count_objects(lines: Iterable[str], *, strict: bool = False) -> ParsedFields:
    """Parse count-objects output with a throwaway :class:`OutputParser`."""
    return OutputParser(strict=strict).parse(lines)


def aggregate_size(fields: Mapping[str, int]) -> int:
    """Total repository size: loose objects plus packs, missing fields count as 0.

    Garbage and other reported metrics are left out, so this is
    not full disk usage.
    """
    return sum(fields.get(name, 0) for name in KIB_FIELDS)


__all__ = [
    "KIB_FIELDS",
    "OutputParseError",
    "OutputParser",
    "aggregate_size",
    "parse_count_objects",
]
