"""Tests for the quick-range catalog and range captions."""

from __future__ import annotations

from datetime import UTC, datetime

from src.timerange.caption import EMPTY_RANGE_CAPTION, caption
from src.timerange.expressions import TimeExpressionParser
from src.timerange.quick_ranges import (
    QUICK_RANGES,
    all_quick_ranges,
    lookup_quick_range,
    search_quick_ranges,
)


def test_catalog_shape_and_order() -> None:
    ranges = all_quick_ranges()

    assert len(ranges) == 22
    assert ranges[0].label == "Last 5 minutes"
    assert ranges[-1].label == "Last 5 years"
    assert all(qr.to == "now" for qr in ranges)


def test_catalog_is_unique_on_expression_pair() -> None:
    pairs = [(qr.from_, qr.to) for qr in QUICK_RANGES]
    assert len(pairs) == len(set(pairs))


def test_catalog_is_ordered_by_ascending_duration() -> None:
    parser = TimeExpressionParser(natural_language=None)
    now = datetime(2024, 3, 10, 12, 0, 0, tzinfo=UTC)

    starts = [parser.parse(qr.from_, now) for qr in QUICK_RANGES]

    assert starts == sorted(starts, reverse=True)  # type: ignore[type-var]


def test_lookup_requires_exact_match() -> None:
    assert lookup_quick_range("180d ago", "now").label == "Last 6 months"  # type: ignore[union-attr]
    assert lookup_quick_range("5m ago", "") is None
    assert lookup_quick_range("5 m ago", "now") is None


def test_search_quick_ranges_is_case_insensitive() -> None:
    labels = [qr.label for qr in search_quick_ranges("HOUR")]

    assert labels == [
        "Last 1 hour",
        "Last 2 hours",
        "Last 3 hours",
        "Last 6 hour",
        "Last 12 hours",
        "Last 24 hours",
    ]
    assert search_quick_ranges("") == list(QUICK_RANGES)
    assert search_quick_ranges("fortnight") == []


def test_caption_empty_range() -> None:
    assert caption("", "") == EMPTY_RANGE_CAPTION == "Select a date range"


def test_caption_open_ended_ranges() -> None:
    assert caption("", "2024-01-01 00:00:00") == "To 2024-01-01 00:00:00"
    assert caption("2024-01-01 00:00:00", "") == "From 2024-01-01 00:00:00"


def test_caption_uses_quick_range_label() -> None:
    assert caption("5m ago", "now") == "Last 5 minutes"
    assert caption("6h ago", "now") == "Last 6 hour"


def test_caption_falls_back_to_literal_join() -> None:
    assert (
        caption("2024-01-01 00:00:00", "2024-01-02 00:00:00")
        == "2024-01-01 00:00:00 - 2024-01-02 00:00:00"
    )


def test_caption_never_parses_expressions() -> None:
    assert caption("tomorrow at 5p", "now") == "tomorrow at 5p - now"
