"""
Unit tests for temporal resolution.

Tests:
- Clock-time detection and false positives
- 24-hour conversion and the bare-hour PM heuristic
- Start/end resolution, roll-forward and tomorrow
- Reference clock snapshot
"""

import sys
from datetime import date, datetime, time, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from nlcal.core.config import ParserConfig
from nlcal.parsing.clock import ReferenceClock
from nlcal.parsing.temporal import (
    ClockTime,
    find_clock_times,
    find_day_part,
    mentions_tomorrow,
    resolve_time,
)


class TestReferenceClock:
    """Tests for ReferenceClock."""

    def test_fields(self, clock):
        assert clock.today == date(2024, 6, 1)
        assert clock.tomorrow == date(2024, 6, 2)
        assert clock.weekday == "Saturday"
        assert clock.tomorrow_weekday == "Sunday"
        assert clock.today_str == "2024-06-01"
        assert clock.tomorrow_str == "2024-06-02"

    def test_month_and_year_rollover(self):
        clock = ReferenceClock.from_datetime(datetime(2024, 12, 31, 23, 0))
        assert clock.tomorrow == date(2025, 1, 1)

    def test_timezone_dropped(self):
        clock = ReferenceClock.from_datetime(datetime(2024, 6, 1, 8, 0, tzinfo=timezone.utc))
        assert clock.now.tzinfo is None
        assert clock.now == datetime(2024, 6, 1, 8, 0)

    def test_date_for(self, clock):
        assert clock.date_for(time(9, 0)) == date(2024, 6, 1)
        assert clock.date_for(time(7, 59)) == date(2024, 6, 2)
        assert clock.date_for(time(8, 0)) == date(2024, 6, 1)
        assert clock.date_for(time(23, 0), force_tomorrow=True) == date(2024, 6, 2)

    def test_minute_precision(self):
        clock = ReferenceClock.from_datetime(datetime(2024, 6, 1, 20, 0, 45))
        assert clock.date_for(time(20, 0)) == date(2024, 6, 1)


class TestFindClockTimes:
    """Tests for clock-time detection."""

    def test_two_times(self):
        times = find_clock_times("gym from 6pm to 8pm")
        assert [(t.hour, t.meridiem) for t in times] == [(6, "pm"), (8, "pm")]

    def test_minutes_and_24h(self):
        times = find_clock_times("standup 9:15 then review 13:30")
        assert [(t.hour, t.minute) for t in times] == [(9, 15), (13, 30)]

    def test_bare_hour_accepted(self):
        times = find_clock_times("meeting at 3")
        assert len(times) == 1
        assert not times[0].is_explicit

    def test_spans_point_at_text(self):
        text = "Lunch at 1pm"
        (found,) = find_clock_times(text)
        assert text[found.span[0]:found.span[1]] == "1pm"

    @pytest.mark.parametrize("text", [
        "run 1.5 miles",
        "pay $5 to sam",
        "room 42",
        "dentist on 2024-06-01",
        "party on 6/15",
        "call 555",
    ])
    def test_not_times(self, text):
        assert find_clock_times(text) == []

    def test_dotted_meridiem(self):
        (found,) = find_clock_times("call at 3 p.m.")
        assert found.meridiem == "pm"


class TestClockTimeConversion:
    """Tests for ClockTime.to_time."""

    @pytest.mark.parametrize("hour,minute,meridiem,expected", [
        (6, None, "pm", time(18, 0)),
        (12, None, "pm", time(12, 0)),
        (12, None, "am", time(0, 0)),
        (9, 30, "am", time(9, 30)),
        (13, 30, None, time(13, 30)),
        (0, 30, None, time(0, 30)),
    ])
    def test_explicit(self, hour, minute, meridiem, expected):
        assert ClockTime(hour, minute, meridiem, (0, 0)).to_time() == expected

    def test_bare_hour_up_to_six_is_pm(self):
        assert ClockTime(3, None, None, (0, 0)).to_time() == time(15, 0)
        assert ClockTime(6, None, None, (0, 0)).to_time() == time(18, 0)

    def test_bare_hour_after_six_is_am(self):
        assert ClockTime(7, None, None, (0, 0)).to_time() == time(7, 0)
        assert ClockTime(11, None, None, (0, 0)).to_time() == time(11, 0)

    def test_zero_padded_hour_is_literal(self):
        assert ClockTime(6, 30, None, (0, 0), zero_padded=True).to_time() == time(6, 30)

    def test_heuristic_is_configurable(self):
        assert ClockTime(3, None, None, (0, 0)).to_time(pm_heuristic_max_hour=0) == time(3, 0)

    def test_out_of_range_clamped(self):
        assert ClockTime(25, None, "pm", (0, 0)).to_time() == time(12, 0)
        assert ClockTime(9, 75, None, (0, 0)).to_time() == time(9, 0)
        assert ClockTime(30, 0, None, (0, 0)).to_time() == time(12, 0)


class TestDayPartsAndTomorrow:
    """Tests for day-part words and tomorrow detection."""

    def test_day_part(self):
        assert find_day_part("dentist tomorrow morning") == ("morning", (17, 24))

    def test_no_day_part(self):
        assert find_day_part("buy groceries") is None

    @pytest.mark.parametrize("text", ["gym tomorrow", "Gym TOMORROW", "gym tmrw", "gym tommorow"])
    def test_mentions_tomorrow(self, text):
        assert mentions_tomorrow(text)

    def test_tomorrow_must_be_a_word(self):
        assert not mentions_tomorrow("tomorrowland tickets")


class TestResolveTime:
    """Tests for resolve_time."""

    def test_range(self, clock):
        result = resolve_time("gym from 6pm to 8pm", clock)
        assert result.start == datetime(2024, 6, 1, 18, 0)
        assert result.end == datetime(2024, 6, 1, 20, 0)
        assert result.matched

    def test_single_time_lasts_an_hour(self, clock):
        result = resolve_time("lunch at 1pm", clock)
        assert result.start == datetime(2024, 6, 1, 13, 0)
        assert result.end == datetime(2024, 6, 1, 14, 0)

    def test_configured_duration(self, clock):
        result = resolve_time("lunch at 1pm", clock, ParserConfig(default_duration_minutes=30))
        assert result.end == datetime(2024, 6, 1, 13, 30)

    def test_day_part(self, clock):
        result = resolve_time("dentist tomorrow morning", clock)
        assert result.start == datetime(2024, 6, 2, 9, 0)
        assert result.end == datetime(2024, 6, 2, 10, 0)
        assert not result.matched

    def test_tomorrow_with_time(self, clock):
        result = resolve_time("gym tomorrow at 6pm", clock)
        assert result.start == datetime(2024, 6, 2, 18, 0)

    def test_passed_time_rolls_forward(self, evening):
        clock = ReferenceClock.from_datetime(evening)
        result = resolve_time("meeting at 2pm", clock)
        assert result.start == datetime(2024, 6, 2, 14, 0)
        assert result.end == datetime(2024, 6, 2, 15, 0)

    def test_range_across_midnight(self, clock):
        result = resolve_time("party 9pm to 1am", clock)
        assert result.start == datetime(2024, 6, 1, 21, 0)
        assert result.end == datetime(2024, 6, 2, 1, 0)

    def test_late_start_default_end_next_day(self, clock):
        result = resolve_time("call at 11:30pm", clock)
        assert result.end == datetime(2024, 6, 2, 0, 30)

    def test_no_signal(self, clock):
        assert resolve_time("buy groceries", clock) is None
