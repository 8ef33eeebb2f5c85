"""
Title and task-description extraction.

Titles are cut from the case-preserving canonical text: everything the
temporal resolver consumed (clock times, day-part words), date connector
words and a leading action verb are removed, and what remains is the
event title.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional

from .intents import PLACEHOLDER_TITLE
from .normalizer import collapse_whitespace
from .temporal import DAY_PART_RE, TOMORROW_WORDS, Span, find_clock_times

CONNECTOR_RE = re.compile(
    r"\b(at|from|to|until|till|on|today|" + "|".join(TOMORROW_WORDS) + r")\b",
    re.IGNORECASE,
)
ACTION_VERB_RE = re.compile(
    r"^(?:schedule|add|create|set\s+up|book)\b\s*(?:(?:an?)\b\s*)?",
    re.IGNORECASE,
)
TASK_VERB_RE = re.compile(
    r"^(?:add|create|remind\s+me\s+to|reminder)\b\s*(?:(?:a\s+)?task\b)?\s*:?\s*",
    re.IGNORECASE,
)
LEADING_JUNK_RE = re.compile(r"^[\W_]+")
TRAILING_SEPARATORS = " ,;:-–"


def _remove_spans(text: str, spans: Iterable[Span]) -> str:
    # Cut from the right so earlier offsets stay valid
    for start, end in sorted(spans, reverse=True):
        text = text[:start] + " " + text[end:]
    return text


def extract_title(
    text: str,
    spans: Optional[Iterable[Span]] = None,
    placeholder: str = PLACEHOLDER_TITLE,
) -> str:
    """
    Recover an event title from command text.

    Args:
        text: Canonical (case-preserving) command text
        spans: Character spans of clock times to cut; found with
            ``find_clock_times`` when omitted
        placeholder: Title used when nothing is left

    Returns:
        Cleaned title, never empty.
    """
    if spans is None:
        spans = [t.span for t in find_clock_times(text)]

    title = _remove_spans(text, spans)
    title = DAY_PART_RE.sub(" ", title)
    title = CONNECTOR_RE.sub(" ", title)
    title = collapse_whitespace(title)
    title = ACTION_VERB_RE.sub("", title)
    title = LEADING_JUNK_RE.sub("", title)
    title = title.rstrip(TRAILING_SEPARATORS)

    return title or placeholder


def strip_task_verbs(text: str) -> str:
    """Drop a leading "add"/"create"/"remind me to" from a task description."""
    return collapse_whitespace(TASK_VERB_RE.sub("", collapse_whitespace(text)))
