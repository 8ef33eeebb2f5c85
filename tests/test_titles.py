"""
Unit tests for title and task extraction.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from nlcal.parsing.titles import extract_title, strip_task_verbs


class TestExtractTitle:
    """Tests for extract_title."""

    @pytest.mark.parametrize("text,expected", [
        ("Gym from 6pm to 8pm", "Gym"),
        ("Dentist tomorrow morning", "Dentist"),
        ("Schedule a meeting with Bob at 3pm", "meeting with Bob"),
        ("Book an appointment at 10:30am", "appointment"),
        ("Lunch with Sam at 1pm", "Lunch with Sam"),
        ("Team standup at 9:15am today", "Team standup"),
        ("Über meeting at 5pm", "Über meeting"),
        ("İstanbul trip at 5pm", "İstanbul trip"),
        ("Éclair tasting tomorrow at 3pm", "Éclair tasting"),
    ])
    def test_titles(self, text, expected):
        assert extract_title(text) == expected

    def test_keeps_case(self):
        assert extract_title("Call MOM at 5pm") == "Call MOM"

    def test_placeholder_when_nothing_left(self):
        assert extract_title("at 6pm") == "New Event"
        assert extract_title("tomorrow at 6pm", placeholder="Untitled") == "Untitled"

    def test_explicit_spans(self):
        text = "Yoga 7 sharp"
        assert extract_title(text, spans=[(5, 6)]) == "Yoga sharp"

    def test_trailing_separators(self):
        assert extract_title("Dinner - at 7pm") == "Dinner"

    def test_leading_punctuation_dropped(self):
        assert extract_title("-- _Review at 4pm") == "Review"


class TestStripTaskVerbs:
    """Tests for strip_task_verbs."""

    @pytest.mark.parametrize("text,expected", [
        ("Add task: Buy groceries", "Buy groceries"),
        ("add a task call the bank", "call the bank"),
        ("Remind me to water the plants", "water the plants"),
        ("create task: file taxes", "file taxes"),
        ("Buy groceries", "Buy groceries"),
        ("  Buy   milk ", "Buy milk"),
    ])
    def test_strip(self, text, expected):
        assert strip_task_verbs(text) == expected

    def test_only_leading_verbs(self):
        assert strip_task_verbs("Pick up the add-on") == "Pick up the add-on"
