"""Human-readable byte sizes — ``"100kb"`` <-> ``102400``.

Units are binary (1kb = 1024 bytes) and case-insensitive.  A bare number
is taken as a byte count.
"""

from __future__ import annotations

import math
import re

_UNITS: dict[str, int] = {
    "b": 1,
    "kb": 1 << 10,
    "mb": 1 << 20,
    "gb": 1 << 30,
    "tb": 1 << 40,
    "pb": 1 << 50,
}

_SIZE_RE = re.compile(r"^\s*([-+]?\d+(?:\.\d+)?)\s*(b|kb|mb|gb|tb|pb)?\s*$", re.IGNORECASE)


def parse_bytes(value: str | int | float | None) -> int | None:
    """Return the byte count for *value*, or ``None`` when it cannot be parsed.

    >>> parse_bytes("100kb")
    102400
    >>> parse_bytes(512)
    512
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return int(value)

    match = _SIZE_RE.match(value)
    if match is None:
        return None
    number, unit = match.groups()
    return math.floor(float(number) * _UNITS[(unit or "b").lower()])


def format_bytes(size: int) -> str:
    """Render *size* with the largest unit that keeps the value >= 1.

    Two decimals at most, trailing zeros trimmed: ``1536 -> "1.5KB"``.
    """
    magnitude = abs(size)
    unit = "B"
    for name, factor in reversed(_UNITS.items()):
        if magnitude >= factor:
            unit = name.upper()
            break
    value = size / _UNITS[unit.lower()]
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text}{unit}"
