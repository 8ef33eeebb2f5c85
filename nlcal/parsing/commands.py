"""
Command classification.

Cheap keyword rules that catch delete, edit and query commands before
any time extraction runs. Order matters: "change my 3pm meeting" has a
time in it but is an edit, so commands are checked first.
"""

from __future__ import annotations

import re
from typing import Optional

from loguru import logger

from .intents import DeleteIntent, EditIntent, Intent, QueryIntent
from .normalizer import collapse_whitespace

DELETE_RE = re.compile(r"\b(delete|remove|cancel|clear)\b")
DELETE_STOPWORDS_RE = re.compile(r"\b(delete|remove|cancel|clear|the|my|please|event)\b")

EDIT_RE = re.compile(r"\b(edit|change|move|reschedule|update)\b")
EDIT_STOPWORDS_RE = re.compile(r"\b(edit|change|move|reschedule|update|the|my|to|event)\b")

QUERY_RE = re.compile(r"^(what|when|how many|do i have|show|list|display)\b")
# One-word requests that mean "show me my calendar"
QUERY_WORDS = {"events", "schedule", "agenda", "calendar"}

DEFAULT_TARGET = "event"
TARGET_PUNCTUATION = " ,.!?:;-–"


def _strip_target(text: str, stopwords: re.Pattern) -> str:
    target = collapse_whitespace(stopwords.sub(" ", text))
    return target.strip(TARGET_PUNCTUATION) or DEFAULT_TARGET


def classify(normalized: str, canonical: Optional[str] = None) -> Optional[Intent]:
    """
    Classify a normalized command.

    Args:
        normalized: Output of ``normalize``
        canonical: Output of ``canonicalize`` for the same text; a query
            keeps it as the question so the user's casing survives

    Returns:
        Delete, Edit or Query intent on a match, otherwise None.
    """
    if DELETE_RE.search(normalized):
        target = _strip_target(normalized, DELETE_STOPWORDS_RE)
        logger.debug(f"⚡ Pattern match: delete '{target}'")
        return DeleteIntent(target=target)

    if EDIT_RE.search(normalized):
        target = _strip_target(normalized, EDIT_STOPWORDS_RE)
        logger.debug(f"⚡ Pattern match: edit '{target}'")
        return EditIntent(target=target, changes={})

    if QUERY_RE.search(normalized) or normalized.strip(" ?!.") in QUERY_WORDS:
        logger.debug("⚡ Pattern match: query")
        return QueryIntent(question=canonical or normalized)

    return None
