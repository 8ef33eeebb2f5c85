"""
Local (deterministic) parser.

normalize -> classify -> resolve_time -> Event, else Task. This is the
fast path whose results are trusted whenever it finds a command or a time.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Optional

from loguru import logger

from ..core.config import ParserConfig
from .clock import ReferenceClock
from .commands import classify
from .intents import BLANK_INPUT_MESSAGE, AnswerIntent, EventIntent, Intent, TaskIntent
from .normalizer import canonicalize, normalize
from .temporal import find_clock_times, resolve_time
from .titles import extract_title, strip_task_verbs


def parse_locally(
    raw: str,
    clock: ReferenceClock,
    parser_config: Optional[ParserConfig] = None,
) -> Intent:
    """
    Parse a command without any model call.

    Args:
        raw: Text as typed or transcribed
        clock: Reference clock for this request
        parser_config: Heuristic tuning (defaults apply when omitted)

    Returns:
        Any Intent variant; blank input yields an Answer with a usage hint.
    """
    parser_config = parser_config or ParserConfig()
    normalized = normalize(raw)

    if not normalized:
        return AnswerIntent(message=BLANK_INPUT_MESSAGE)

    canonical = canonicalize(raw)
    command = classify(normalized, canonical)
    if command is not None:
        return command

    resolution = resolve_time(normalized, clock, parser_config)
    if resolution is not None:
        title = extract_title(
            canonical,
            [t.span for t in find_clock_times(canonical)],
            placeholder=parser_config.placeholder_title,
        )
        logger.debug(f"Local parse: event '{title}' {resolution.start} -> {resolution.end}")
        return EventIntent.build(
            title,
            resolution.start,
            resolution.end,
            duration=timedelta(minutes=parser_config.default_duration_minutes),
            placeholder=parser_config.placeholder_title,
        )

    description = strip_task_verbs(canonical) or canonical
    logger.debug(f"Local parse: no time signal, task '{description}'")
    return TaskIntent(description=description)
