from __future__ import annotations

import math
import re
from typing import Any

MIN_TAP_MINUTES = 1
MAX_TAP_MINUTES = 600

_LEADING_INT = re.compile(r"\s*([+-]?)(\d+)")


def sanitize_minutes(value: Any, default: int = 0) -> int:
    """Coerce user input into a non-negative minute count.

    Strings are read by their leading integer ("-20" -> 0, "2.5" -> 2,
    "42 min" -> 42). Without one, only their digits are kept ("min12" -> 12);
    no digits at all falls back to ``default``. Never raises.
    """
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return max(0, value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return default
        return max(0, int(value))
    if isinstance(value, str):
        m = _LEADING_INT.match(value)
        if m:
            return 0 if m.group(1) == "-" else int(m.group(2))
        digits = "".join(ch for ch in value if "0" <= ch <= "9")
        if not digits:
            return default
        return int(digits)
    return default


def clamp_tap_minutes(value: Any) -> int:
    minutes = sanitize_minutes(value, default=MIN_TAP_MINUTES)
    return min(max(minutes, MIN_TAP_MINUTES), MAX_TAP_MINUTES)
