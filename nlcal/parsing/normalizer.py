"""
Text normalization for command parsing.

Cleans typed or dictated input into a canonical form:
- whitespace collapsed
- spoken clock idioms ("half past 3") rewritten as clock times
- meridiem dictation typos ("3 p.m.", "3pmm") repaired
- "3 pm" collapsed to "3pm", "3.45pm" rewritten as "3:45pm"

``canonicalize`` keeps the original casing (titles are cut from it);
``normalize`` is the lowercase form the matchers run on. Both are pure
and idempotent.
"""

from __future__ import annotations

import re
from typing import Callable, List, Tuple, Union

Replacement = Union[str, Callable[[re.Match], str]]

_WHITESPACE_RE = re.compile(r"\s+")


def _quarter_to(match: re.Match) -> str:
    hour = int(match.group(1))
    # "quarter to 1" is 12:45; 0 is read as 12
    previous = 12 if hour == 1 else (hour or 12) - 1
    return f"{previous}:45"


# Order matters: idioms first, then meridiem repairs, then time shapes
_REWRITES: List[Tuple[re.Pattern, Replacement]] = [
    (re.compile(r"\bhalf\s+past\s+(\d{1,2})\b(?![:.]\d)", re.IGNORECASE), r"\1:30"),
    (re.compile(r"\bquarter\s+past\s+(\d{1,2})\b(?![:.]\d)", re.IGNORECASE), r"\1:15"),
    (re.compile(r"\bquarter\s+to\s+(\d{1,2})\b(?![:.]\d)", re.IGNORECASE), _quarter_to),
    (re.compile(r"(?<![:.])\b(\d{1,2})\s*o\s?['’]?\s?clock\b", re.IGNORECASE), r"\1:00"),
    # Dotted markers: "3 p.m.", "3 a. m"
    (re.compile(r"(\d)\s*([ap])\s?\.\s?(m)\b\.?", re.IGNORECASE), r"\1\2\3"),
    # Dictation typos: "3pmm", "3 pmn", "3ams", "3 p.m.m"
    (re.compile(r"(\d)\s*([ap]m)[mns]+\b", re.IGNORECASE), r"\1\2"),
    (re.compile(r"(\d)\s+([ap]m)\b", re.IGNORECASE), r"\1\2"),
    (re.compile(r"\b(\d{1,2})\.(\d{2})(?=[ap]m\b)", re.IGNORECASE), r"\1:\2"),
]


def collapse_whitespace(text: str) -> str:
    """Collapse whitespace runs to single spaces and trim the ends."""
    return _WHITESPACE_RE.sub(" ", text).strip()


def canonicalize(raw: str) -> str:
    """
    Normalize ``raw`` while preserving its casing.

    Args:
        raw: Text as typed or transcribed

    Returns:
        Cleaned text; unrecognized phrasing is left untouched.
    """
    text = collapse_whitespace(raw or "")
    for pattern, replacement in _REWRITES:
        text = pattern.sub(replacement, text)
    return text


def normalize(raw: str) -> str:
    """Canonical lowercase form used for matching."""
    return canonicalize(raw).lower()
