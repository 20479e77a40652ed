"""Human-readable byte formatting."""

from __future__ import annotations

from typing import Sequence

UNITS: Sequence[str] = ("B", "KB", "MB", "GB", "TB")
_STEP = 1024


def format_bytes(num_bytes: int) -> str:
    """Render ``num_bytes`` with binary scaling, e.g. ``1572864 -> "1.50 MB"``.

    The value is divided by 1024 until it drops below 1024 or the largest
    unit is reached, then printed with two decimals.
    """
    if num_bytes < 0:
        raise ValueError(f"byte count must be non-negative, got {num_bytes}")
    if num_bytes == 0:
        return "0 B"

    size = float(num_bytes)
    unit_index = 0
    while size >= _STEP and unit_index < len(UNITS) - 1:
        size /= _STEP
        unit_index += 1
    return f"{size:.2f} {UNITS[unit_index]}"


__all__ = ["UNITS", "format_bytes"]
