"""Elapsed-time formatting for execution results."""

from __future__ import annotations

import math


def format_elapsed(ms: float) -> str:
    """Format a duration in milliseconds for display.

    Examples:
        500 -> "500 ms", 1500 -> "1.50 s", 15000 -> "15.0 s", -5 -> ""
    """

    if not math.isfinite(ms) or ms < 0:
        return ""
    if ms < 1000:
        # Half-up rounding.
        return f"{math.floor(ms + 0.5)} ms"
    seconds = ms / 1000
    precision = 1 if seconds >= 10 else 2
    return f"{seconds:.{precision}f} s"


def success_message(elapsed_ms: float) -> str:
    elapsed = format_elapsed(elapsed_ms)
    return f"successful execution in {elapsed}" if elapsed else "successful execution"
