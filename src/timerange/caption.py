"""Display captions for a `(from, to)` pair of time expressions.

Captions work on the raw expression text and never parse it, so a half-typed expression still gets
a caption.
"""

from __future__ import annotations

from src.timerange.quick_ranges import lookup_quick_range

EMPTY_RANGE_CAPTION = "Select a date range"


def caption(from_: str, to: str) -> str:
    """Return the caption for a time range (first matching rule wins)."""

    if from_ == "" and to == "":
        return EMPTY_RANGE_CAPTION
    if from_ == "":
        return f"To {to}"
    if to == "":
        return f"From {from_}"

    quick_range = lookup_quick_range(from_, to)
    if quick_range:
        return quick_range.label
    return f"{from_} - {to}"
