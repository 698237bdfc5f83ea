from __future__ import annotations

import math
import re
from datetime import datetime, timezone

_NUMBER_PREFIX = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")
_INT_PREFIX = re.compile(r"^\s*[+-]?\d+")


def iso_now() -> str:
    # Use UTC ISO timestamps for consistency.
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def round_half_up(value: float) -> int:
    return int(math.floor(float(value) + 0.5))


def parse_number(value) -> float | None:
    """
    Lenient number parsing for free-text cells: "12.5kg" -> 12.5, "abc" -> None.
    Non-finite values ("1e999", NaN, Infinity) are not numbers here.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            f = float(value)
        except OverflowError:
            return None
    else:
        m = _NUMBER_PREFIX.match(str(value))
        if not m:
            return None
        f = float(m.group(0))
    return f if math.isfinite(f) else None


def parse_int(value) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    m = _INT_PREFIX.match(str(value))
    return int(m.group(0)) if m else None


def fmt_amount(value: float) -> str:
    return f"{float(value):,.0f}" if float(value).is_integer() else f"{float(value):,.2f}"
