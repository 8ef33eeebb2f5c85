"""Parsing pipeline: free text to calendar intents."""

from .clock import ReferenceClock
from .commands import classify
from .generative import GenerativeFallbackAdapter, build_prompt, candidate_to_intent, extract_json
from .intents import (
    AnswerIntent,
    DeleteIntent,
    EditIntent,
    EventIntent,
    Intent,
    QueryIntent,
    TaskIntent,
)
from .local import parse_locally
from .normalizer import canonicalize, normalize
from .resolver import IntentResolver, aresolve_intent, resolve_intent
from .temporal import TimeResolution, find_clock_times, mentions_tomorrow, resolve_time
from .titles import extract_title, strip_task_verbs

__all__ = [
    "ReferenceClock",
    "classify",
    "GenerativeFallbackAdapter",
    "build_prompt",
    "candidate_to_intent",
    "extract_json",
    "AnswerIntent",
    "DeleteIntent",
    "EditIntent",
    "EventIntent",
    "Intent",
    "QueryIntent",
    "TaskIntent",
    "parse_locally",
    "canonicalize",
    "normalize",
    "IntentResolver",
    "aresolve_intent",
    "resolve_intent",
    "TimeResolution",
    "find_clock_times",
    "mentions_tomorrow",
    "resolve_time",
    "extract_title",
    "strip_task_verbs",
]
