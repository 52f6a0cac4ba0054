"""
core.fmt
Display helpers shared by UI and notices.
"""

from __future__ import annotations

import math

_SUFFIXES = ((1e12, "T"), (1e9, "B"), (1e6, "M"), (1e3, "K"))


def format_number(num: float) -> str:
    """1234 -> '1.2K', 5e9 -> '5.0B'; below 1000 the integer part."""
    n = float(num)
    for size, suffix in _SUFFIXES:
        if n >= size:
            return f"{n / size:.1f}{suffix}"
    return str(int(math.floor(n)))


def format_duration(ms: int) -> str:
    total = max(0, int(ms)) // 1000
    hours, rem = divmod(total, 3600)
    minutes, seconds = divmod(rem, 60)
    if hours:
        return f"{hours}h {minutes}m"
    if minutes:
        return f"{minutes}m {seconds}s"
    return f"{seconds}s"
