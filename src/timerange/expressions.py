"""Time expression parsing (text -> absolute instant).

Three expression families are recognized, tried in order:
    - canonical absolute text: `YYYY-MM-DD HH:mm:ss` in the display timezone,
    - relative offsets: `<integer><unit> ago` (units `s`, `m`, `h`, `d`, `y`) and `now`,
    - natural language ("yesterday", "2 days ago", ...), via a pluggable parser.

Relative expressions are evaluated against the `now` passed by the caller, so the same text
resolves to different instants at different evaluation times.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta, tzinfo

import dateparser
from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)

CANONICAL_FORMAT = "%Y-%m-%d %H:%M:%S"
INVALID_DATE_FORMAT = "invalid date format"

Clock = Callable[[], datetime]
NaturalLanguageParser = Callable[[str, datetime], datetime | None]

_CANONICAL_RE = re.compile(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}")
_RELATIVE_RE = re.compile(r"(?P<amount>\d+)\s*(?P<unit>[smhdy])\s+ago", flags=re.IGNORECASE)

# Clock units are absolute durations; calendar units follow the display timezone's wall clock.
_CLOCK_UNITS: dict[str, str] = {"s": "seconds", "m": "minutes", "h": "hours"}
_CALENDAR_UNITS: dict[str, str] = {"d": "days", "y": "years"}

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

# Bare numbers ("5", "10") are half-typed input, not dates.
_BARE_NUMBER_RE = re.compile(r"[\d\s]+")


@dataclass(frozen=True)
class ParseError:
    """A failed parse. Returned, never raised."""

    message: str = INVALID_DATE_FORMAT


def utc_now() -> datetime:
    """Default clock."""

    return datetime.now(UTC)


def has_fixed_offset(tz: tzinfo) -> bool:
    """Return True if `tz` kept a single UTC offset over 1970-2037.

    Canonical text only round-trips in such zones: with DST, a fall-back wall time names two
    instants and a spring-forward wall time names none.
    """

    offsets = {
        datetime(year, month, 1, tzinfo=tz).utcoffset()
        for year in range(1970, 2038)
        for month in (1, 7)
    }
    return len(offsets) == 1


def _tz_name(tz: tzinfo | None) -> str:
    if tz is None:
        return "UTC"
    return getattr(tz, "key", None) or tz.tzname(None) or "UTC"


def dateparser_natural_language(text: str, now: datetime) -> datetime | None:
    """Parse human phrasing with `dateparser`, relative to `now`.

    Returns `None` when the text is not recognized.
    """

    dt = dateparser.parse(
        text,
        settings={
            "TIMEZONE": _tz_name(now.tzinfo),
            "RETURN_AS_TIMEZONE_AWARE": True,
            "RELATIVE_BASE": now.replace(tzinfo=None),
        },
    )
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=now.tzinfo)
    return dt


class TimeExpressionParser:
    """Resolve time expressions into timezone-aware instants.

    Args:
        tz: Display timezone with a fixed UTC offset. Canonical text is read and written in this
            zone.
        natural_language: Fallback parser for human phrasing; `None` disables the fallback.
    """

    def __init__(
            self,
            tz: tzinfo = UTC,
            *,
            natural_language: NaturalLanguageParser | None = dateparser_natural_language,
    ) -> None:
        if not has_fixed_offset(tz):
            raise ValueError(f"display timezone must have a fixed UTC offset: {_tz_name(tz)}")
        self.tz = tz
        self._natural_language = natural_language

    def parse(self, text: str, now: datetime) -> datetime | ParseError:
        """Parse `text` into an instant, or return `ParseError` on failure.

        Empty text is invalid here: callers must treat "" as an unset bound before calling.
        """

        value = (text or "").strip()
        if not value:
            return ParseError()

        now = self._localize(now)

        if _CANONICAL_RE.fullmatch(value):
            try:
                return datetime.strptime(value, CANONICAL_FORMAT).replace(tzinfo=self.tz)
            except ValueError:
                # Looks canonical but is out of range (e.g. month 13).
                return ParseError()

        if value.lower() == "now":
            return now

        match = _RELATIVE_RE.fullmatch(value)
        if match:
            return self._subtract(now, int(match.group("amount")), match.group("unit").lower())

        return self._parse_natural_language(value, now)

    def format(self, instant: datetime) -> str:
        """Format an instant as canonical `YYYY-MM-DD HH:mm:ss` text (second precision)."""

        t = self._localize(instant)
        return (
            f"{t.year:04d}-{t.month:02d}-{t.day:02d} "
            f"{t.hour:02d}:{t.minute:02d}:{t.second:02d}"
        )

    def describe(self, text: str, now: datetime) -> str:
        """Return the inline hint shown next to a time input.

        Empty text yields `""`, unparseable text yields the parse error message, anything else
        yields the canonical rendering of the resolved instant.
        """

        if not (text or "").strip():
            return ""
        result = self.parse(text, now)
        if isinstance(result, ParseError):
            return result.message
        return self.format(result)

    def _localize(self, instant: datetime) -> datetime:
        if instant.tzinfo is None:
            return instant.replace(tzinfo=self.tz)
        return instant.astimezone(self.tz)

    def _subtract(self, now: datetime, amount: int, unit: str) -> datetime:
        if unit in _CLOCK_UNITS:
            delta = timedelta(**{_CLOCK_UNITS[unit]: amount})
            return (now.astimezone(UTC) - delta).astimezone(self.tz)
        return now - relativedelta(**{_CALENDAR_UNITS[unit]: amount})

    def _parse_natural_language(self, value: str, now: datetime) -> datetime | ParseError:
        if self._natural_language is None or _BARE_NUMBER_RE.fullmatch(value):
            return ParseError()
        try:
            parsed = self._natural_language(value, now)
        except Exception:  # noqa: BLE001
            # A third-party parser failure is an unparseable expression, not a crash.
            logger.debug("natural language parser failed text=%r", value, exc_info=True)
            return ParseError()
        if parsed is None:
            return ParseError()
        return self._localize(parsed)


def to_epoch_ms(instant: datetime) -> int:
    """Convert an aware instant to integer epoch milliseconds."""

    return (instant - _EPOCH) // timedelta(milliseconds=1)
