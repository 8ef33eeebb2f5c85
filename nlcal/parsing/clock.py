"""
Reference clock for a single parse request.

All relative dates ("tomorrow", "already passed today") are resolved
against one frozen snapshot so a parse never sees two different "nows".
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional


@dataclass(frozen=True)
class ReferenceClock:
    """Immutable snapshot of "now" decomposed for date resolution."""
    now: datetime
    today: date
    weekday: str
    tomorrow: date
    tomorrow_weekday: str

    @classmethod
    def from_datetime(cls, now: datetime) -> "ReferenceClock":
        """Build a clock from an explicit reference time."""
        # Resolution works on naive wall-clock values
        if now.tzinfo is not None:
            now = now.replace(tzinfo=None)
        now = now.replace(microsecond=0)
        tomorrow = now.date() + timedelta(days=1)
        return cls(
            now=now,
            today=now.date(),
            weekday=now.strftime("%A"),
            tomorrow=tomorrow,
            tomorrow_weekday=tomorrow.strftime("%A"),
        )

    @classmethod
    def capture(cls, now: Optional[datetime] = None) -> "ReferenceClock":
        """Snapshot the system clock unless a reference time is given."""
        return cls.from_datetime(now if now is not None else datetime.now())

    @property
    def today_str(self) -> str:
        return self.today.isoformat()

    @property
    def tomorrow_str(self) -> str:
        return self.tomorrow.isoformat()

    @property
    def time_of_day(self) -> time:
        # Minute precision: 20:00 is not "passed" at 20:00:30
        return self.now.time().replace(second=0)

    def date_for(self, start: time, force_tomorrow: bool = False) -> date:
        """
        Pick the calendar date for a resolved start time.

        Tomorrow when forced, or when the time has already passed today.
        """
        if force_tomorrow or start < self.time_of_day:
            return self.tomorrow
        return self.today
