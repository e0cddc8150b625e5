"""Predefined quick ranges.

The catalog is declared once, in ascending duration order, and never mutated. Entries are unique on
the `(from, to)` pair, so `lookup_quick_range` is unambiguous.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class QuickRange:
    """A named `(from, to)` pair of relative time expressions."""

    label: str
    from_: str
    to: str


QUICK_RANGES: tuple[QuickRange, ...] = (
    QuickRange("Last 5 minutes", "5m ago", "now"),
    QuickRange("Last 10 minutes", "10m ago", "now"),
    QuickRange("Last 15 minutes", "15m ago", "now"),
    QuickRange("Last 20 minutes", "20m ago", "now"),
    QuickRange("Last 30 minutes", "30m ago", "now"),
    QuickRange("Last 1 hour", "1h ago", "now"),
    QuickRange("Last 2 hours", "2h ago", "now"),
    QuickRange("Last 3 hours", "3h ago", "now"),
    QuickRange("Last 6 hour", "6h ago", "now"),
    QuickRange("Last 12 hours", "12h ago", "now"),
    QuickRange("Last 24 hours", "24h ago", "now"),
    QuickRange("Last 2 days", "2d ago", "now"),
    QuickRange("Last 3 days", "3d ago", "now"),
    QuickRange("Last 7 days", "7d ago", "now"),
    QuickRange("Last 14 days", "14d ago", "now"),
    QuickRange("Last 30 days", "30d ago", "now"),
    QuickRange("Last 90 days", "90d ago", "now"),
    QuickRange("Last 6 months", "180d ago", "now"),
    QuickRange("Last 1 year", "1y ago", "now"),
    QuickRange("Last 2 years", "2y ago", "now"),
    QuickRange("Last 3 years", "3y ago", "now"),
    QuickRange("Last 5 years", "5y ago", "now"),
)


def all_quick_ranges() -> tuple[QuickRange, ...]:
    return QUICK_RANGES


def lookup_quick_range(from_: str, to: str) -> QuickRange | None:
    """Return the first catalog entry whose expressions equal `(from_, to)` exactly."""

    for quick_range in QUICK_RANGES:
        if quick_range.from_ == from_ and quick_range.to == to:
            return quick_range
    return None


def search_quick_ranges(term: str) -> list[QuickRange]:
    """Filter the catalog by a case-insensitive label substring, keeping catalog order."""

    needle = (term or "").strip().lower()
    if not needle:
        return list(QUICK_RANGES)
    return [qr for qr in QUICK_RANGES if needle in qr.label.lower()]
