"""
Temporal resolution.

Finds clock times ("6pm", "18:30", a bare "3") and day-part words
("evening") in normalized text and resolves them to concrete datetimes
against a ReferenceClock.

Rules:
- First accepted clock time is the start, a second one the end,
  otherwise the event lasts one hour.
- A bare hour up to 6 without am/pm means the afternoon ("at 3" is 15:00).
- "tomorrow" picks the clock's tomorrow; otherwise a start that has
  already passed today rolls forward to tomorrow.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import List, Optional, Tuple

from ..core.config import ParserConfig
from .clock import ReferenceClock
from .intents import order_end

Span = Tuple[int, int]

CLOCK_TIME_RE = re.compile(
    r"(?<![\d:/.$£€])\b(?P<hour>\d{1,2})(?::(?P<minute>\d{2}))?"
    r"\s*(?P<meridiem>[ap]\.?m\.?)?(?![\w:/]|\.\d)",
    re.IGNORECASE,
)

# Calendar dates whose numbers must not be read as times
DATE_LIKE_RE = re.compile(r"\b\d{4}-\d{1,2}-\d{1,2}\b|\b\d{1,2}/\d{1,2}(?:/\d{2,4})?\b")

DAY_PARTS = {
    "morning": time(9, 0),
    "noon": time(12, 0),
    "midday": time(12, 0),
    "afternoon": time(14, 0),
    "evening": time(18, 0),
    "night": time(21, 0),
    "tonight": time(21, 0),
    "midnight": time(0, 0),
}
DAY_PART_RE = re.compile(r"\b(" + "|".join(DAY_PARTS) + r")\b", re.IGNORECASE)

TOMORROW_WORDS = ("tomorrow", "tommorow", "tomorow", "tmrw")
TOMORROW_RE = re.compile(r"\b(" + "|".join(TOMORROW_WORDS) + r")\b", re.IGNORECASE)


@dataclass(frozen=True)
class ClockTime:
    """One clock-time mention in the text."""
    hour: int
    minute: Optional[int]
    meridiem: Optional[str]
    span: Span
    zero_padded: bool = False

    @property
    def is_explicit(self) -> bool:
        """Carries am/pm or minutes, so it cannot be an ordinary number."""
        return self.meridiem is not None or self.minute is not None

    def to_time(self, pm_heuristic_max_hour: int = 6) -> time:
        """Convert to a 24-hour time, clamping nonsense values to noon / :00."""
        hour = self.hour
        minute = self.minute if self.minute is not None else 0

        if self.meridiem:
            if not 1 <= hour <= 12:
                hour = 12
            elif self.meridiem == "pm" and hour != 12:
                hour += 12
            elif self.meridiem == "am" and hour == 12:
                hour = 0
        elif 1 <= hour <= pm_heuristic_max_hour and not self.zero_padded:
            hour += 12

        if hour > 23:
            hour = 12
        if minute > 59:
            minute = 0
        return time(hour, minute)


@dataclass(frozen=True)
class TimeResolution:
    """Concrete start/end resolved from a piece of text."""
    start: datetime
    end: datetime
    matched: bool
    spans: Tuple[Span, ...] = ()


def mentions_tomorrow(text: str) -> bool:
    """Whether the text says "tomorrow" (or a common misspelling)."""
    return bool(TOMORROW_RE.search(text))


def _overlaps(span: Span, others: List[Span]) -> bool:
    return any(span[0] < end and start < span[1] for start, end in others)


def find_clock_times(text: str) -> List[ClockTime]:
    """
    Scan text for clock-time mentions.

    A candidate counts when it has am/pm, has minutes, or is a bare
    number from 1 to 12.

    Args:
        text: Normalized or canonical text (matching ignores case)

    Returns:
        Accepted mentions in text order.
    """
    date_spans = [m.span() for m in DATE_LIKE_RE.finditer(text)]
    found: List[ClockTime] = []

    for match in CLOCK_TIME_RE.finditer(text):
        if _overlaps(match.span(), date_spans):
            continue

        hour_str = match.group("hour")
        minute_str = match.group("minute")
        meridiem = match.group("meridiem")
        if meridiem:
            meridiem = meridiem.replace(".", "").lower()

        candidate = ClockTime(
            hour=int(hour_str),
            minute=int(minute_str) if minute_str is not None else None,
            meridiem=meridiem,
            span=match.span(),
            zero_padded=len(hour_str) == 2 and hour_str.startswith("0"),
        )
        if candidate.is_explicit or 1 <= candidate.hour <= 12:
            found.append(candidate)

    return found


def find_day_part(text: str) -> Optional[Tuple[str, Span]]:
    """First day-part word ("morning", "evening", ...) in the text."""
    match = DAY_PART_RE.search(text)
    if not match:
        return None
    return match.group(1).lower(), match.span()


def resolve_time(
    normalized: str,
    clock: ReferenceClock,
    parser_config: Optional[ParserConfig] = None,
) -> Optional[TimeResolution]:
    """
    Resolve the start and end of an event described in ``normalized``.

    Args:
        normalized: Normalized command text
        clock: Reference clock for this request
        parser_config: Heuristic tuning (defaults apply when omitted)

    Returns:
        TimeResolution, or None when the text carries no time signal at all.
    """
    parser_config = parser_config or ParserConfig()
    duration = timedelta(minutes=parser_config.default_duration_minutes)

    times = find_clock_times(normalized)
    if times:
        start_t = times[0].to_time(parser_config.pm_heuristic_max_hour)
        end_t = times[1].to_time(parser_config.pm_heuristic_max_hour) if len(times) > 1 else None
        spans = tuple(t.span for t in times)
        matched = True
    else:
        day_part = find_day_part(normalized)
        if day_part is None:
            return None
        word, span = day_part
        start_t = DAY_PARTS[word]
        end_t = None
        spans = (span,)
        matched = False

    day = clock.date_for(start_t, force_tomorrow=mentions_tomorrow(normalized))
    start = datetime.combine(day, start_t)

    if end_t is None:
        # Default length on the same date; order_end rolls it past midnight
        end_t = (start + duration).time()
    end = order_end(start, datetime.combine(day, end_t), duration)

    return TimeResolution(start=start, end=end, matched=matched, spans=spans)
