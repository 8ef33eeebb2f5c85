"""
Unit tests for text normalization.

Tests:
- Whitespace and casing
- Spoken clock idioms
- Meridiem repairs
- Idempotency
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from nlcal.parsing.normalizer import canonicalize, collapse_whitespace, normalize


class TestWhitespaceAndCase:
    """Tests for basic cleanup."""

    def test_collapses_whitespace(self):
        assert collapse_whitespace("  Gym \t at\n 6pm  ") == "Gym at 6pm"

    def test_normalize_lowercases(self):
        assert normalize("Gym At 6PM") == "gym at 6pm"

    def test_canonicalize_keeps_case(self):
        assert canonicalize("  Lunch with   Sam at 1 PM ") == "Lunch with Sam at 1PM"

    def test_empty_and_none(self):
        assert normalize("") == ""
        assert normalize("   ") == ""
        assert canonicalize(None) == ""


class TestClockIdioms:
    """Tests for spoken clock phrases."""

    def test_half_past(self):
        assert normalize("call at half past 3") == "call at 3:30"

    def test_quarter_past(self):
        assert normalize("standup quarter past 9") == "standup 9:15"

    def test_quarter_to(self):
        assert normalize("leave at quarter to 5") == "leave at 4:45"

    def test_quarter_to_one_wraps_to_twelve(self):
        assert normalize("quarter to 1") == "12:45"

    def test_quarter_to_zero_reads_as_twelve(self):
        assert normalize("quarter to 0") == "11:45"

    def test_oclock(self):
        assert normalize("dinner at 7 o'clock") == "dinner at 7:00"
        assert normalize("dinner at 7 oclock") == "dinner at 7:00"


class TestMeridiemRepairs:
    """Tests for am/pm dictation fixes."""

    @pytest.mark.parametrize("raw,expected", [
        ("meeting at 3 pm", "meeting at 3pm"),
        ("meeting at 3 p.m.", "meeting at 3pm"),
        ("meeting at 3 P.M", "meeting at 3pm"),
        ("meeting at 3pmm", "meeting at 3pm"),
        ("meeting at 3 amn", "meeting at 3am"),
        ("meeting at 3.45pm", "meeting at 3:45pm"),
        ("meeting at 3.45 pm", "meeting at 3:45pm"),
        ("meeting at 3 p.m.m", "meeting at 3pm"),
        ("meeting at 3 p.m.s", "meeting at 3pm"),
        ("meeting at 3.45 pmm", "meeting at 3:45pm"),
    ])
    def test_repairs(self, raw, expected):
        assert normalize(raw) == expected

    def test_plain_decimals_untouched(self):
        assert normalize("run 1.5 miles") == "run 1.5 miles"

    def test_words_after_numbers_untouched(self):
        assert normalize("flight to 3 amsterdam hotels") == "flight to 3 amsterdam hotels"


class TestIdempotency:
    """normalize(normalize(x)) == normalize(x)."""

    @pytest.mark.parametrize("raw", [
        "Gym from 6 pm to 8 p.m.",
        "half past 3:30",
        "quarter to 1",
        "Dinner at 7 o'clock tomorrow",
        "call mom 3.45 pm",
        "  Buy   groceries  ",
        "meeting 10:00 o'clock",
        "meeting at 3 p.m.m",
        "meeting at 3 p.m.s",
        "quarter to 0",
    ])
    def test_normalize_is_idempotent(self, raw):
        once = normalize(raw)
        assert normalize(once) == once

    def test_canonicalize_is_idempotent(self):
        once = canonicalize("Standup at Half Past 9 A.M.")
        assert canonicalize(once) == once
