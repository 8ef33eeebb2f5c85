"""
Intent resolution.

Ties the pipeline together:
    local parser -> (generative fallback for plain tasks) -> corrections

Corrections applied to every Event, whichever stage produced it:
- "tomorrow" in the text forces the event onto the clock's tomorrow
- a clock time left behind in the title is resolved and removed

Resolution is total: every input string yields an Intent.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta
from typing import Optional

from loguru import logger

from ..core.config import NlcalConfig, config
from ..core.errors import GenerativeError, describe_error
from ..core.llm import OllamaClient
from .clock import ReferenceClock
from .generative import GenerativeFallbackAdapter, build_prompt, candidate_to_intent, default_start
from .intents import (
    BLANK_INPUT_MESSAGE,
    COMMAND_INTENTS,
    AnswerIntent,
    EventIntent,
    Intent,
    TaskIntent,
    order_end,
)
from .local import parse_locally
from .normalizer import canonicalize, collapse_whitespace, normalize
from .temporal import find_clock_times, mentions_tomorrow, resolve_time
from .titles import extract_title

TRUSTED_INTENTS = COMMAND_INTENTS + (AnswerIntent, EventIntent)


class IntentResolver:
    """
    Resolves free text into a single Intent.

    Usage:
        resolver = IntentResolver.from_config()
        intent = resolver.resolve("Gym from 6pm to 8pm")
        print(intent.to_dict())
    """

    def __init__(
        self,
        adapter: Optional[GenerativeFallbackAdapter] = None,
        config: Optional[NlcalConfig] = None,
    ):
        self.adapter = adapter
        self.config = config or NlcalConfig()

    @classmethod
    def from_config(cls, cfg: Optional[NlcalConfig] = None) -> "IntentResolver":
        """Build a resolver backed by Ollama when the generative path is enabled."""
        cfg = cfg or config()
        adapter = None
        if cfg.generative.enabled:
            client = OllamaClient.from_config(cfg.generative)
            adapter = GenerativeFallbackAdapter(client, timeout_ms=cfg.generative.timeout_ms)
        return cls(adapter=adapter, config=cfg)

    @property
    def generative_enabled(self) -> bool:
        return self.adapter is not None and self.config.generative.enabled

    @property
    def duration(self) -> timedelta:
        return timedelta(minutes=self.config.parser.default_duration_minutes)

    # =========================================================================
    # Selection
    # =========================================================================

    def _needs_model(self, local: Intent) -> bool:
        return not isinstance(local, TRUSTED_INTENTS) and self.generative_enabled

    def select(self, local: Intent, text: str, clock: ReferenceClock) -> Intent:
        """
        Choose between the local result and the model's.

        Commands, answers and events from the local parser are trusted.
        A task goes to the model; any model failure keeps the local task.
        """
        if not self._needs_model(local):
            return local

        logger.debug("🤖 No time found locally, asking the AI model")
        try:
            payload = self.adapter.call_model(build_prompt(text, clock))
        except GenerativeError as e:
            logger.warning(f"⚠️ AI fallback failed ({describe_error(e)}): {e}")
            return local

        return candidate_to_intent(
            payload, text, clock,
            fallback_start=default_start(text, clock, self.config.parser),
            parser_config=self.config.parser,
        )

    async def aselect(self, local: Intent, text: str, clock: ReferenceClock) -> Intent:
        """Async variant of ``select``."""
        if not self._needs_model(local):
            return local

        logger.debug("🤖 No time found locally, asking the AI model")
        try:
            payload = await self.adapter.acall_model(build_prompt(text, clock))
        except GenerativeError as e:
            logger.warning(f"⚠️ AI fallback failed ({describe_error(e)}): {e}")
            return local

        return candidate_to_intent(
            payload, text, clock,
            fallback_start=default_start(text, clock, self.config.parser),
            parser_config=self.config.parser,
        )

    # =========================================================================
    # Corrections
    # =========================================================================

    def force_tomorrow(self, event: EventIntent, raw_text: str, clock: ReferenceClock) -> EventIntent:
        """Move the event onto tomorrow when the text says "tomorrow"."""
        if not mentions_tomorrow(raw_text) or event.start.date() == clock.tomorrow:
            return event

        start = datetime.combine(clock.tomorrow, event.start.time())
        end = datetime.combine(clock.tomorrow, event.end.time())
        logger.debug(f"Forcing event '{event.title}' onto {clock.tomorrow_str}")
        return replace(event, start=start, end=order_end(start, end, self.duration))

    def fix_title_time(self, event: EventIntent, clock: ReferenceClock) -> EventIntent:
        """Resolve a clock time that was left inside the title."""
        if not any(t.is_explicit for t in find_clock_times(event.title)):
            return event

        resolution = resolve_time(normalize(event.title), clock, self.config.parser)
        if resolution is None:
            return event

        day = event.start.date()
        start = datetime.combine(day, resolution.start.time())
        end = datetime.combine(day, resolution.end.time())
        title = extract_title(
            collapse_whitespace(event.title),
            placeholder=self.config.parser.placeholder_title,
        )
        logger.debug(f"Time found in title '{event.title}', now '{title}' at {start}")
        return EventIntent.build(
            title, start, end,
            duration=self.duration,
            placeholder=self.config.parser.placeholder_title,
        )

    def correct(self, intent: Intent, raw_text: str, clock: ReferenceClock) -> Intent:
        """Apply the event corrections; other intents pass through."""
        if not isinstance(intent, EventIntent):
            return intent
        intent = self.force_tomorrow(intent, raw_text, clock)
        return self.fix_title_time(intent, clock)

    # =========================================================================
    # Entry points
    # =========================================================================

    @staticmethod
    def _last_resort(text: str) -> Intent:
        description = canonicalize(text)
        if not description:
            return AnswerIntent(message=BLANK_INPUT_MESSAGE)
        return TaskIntent(description=description)

    def _finish(self, intent: Intent, text: str) -> Intent:
        logger.info(f"✅ '{text.strip()[:60]}' -> {intent.kind}")
        return intent

    def resolve(self, text: str, now: Optional[datetime] = None) -> Intent:
        """
        Resolve a command to an Intent.

        Args:
            text: Command as typed or transcribed
            now: Reference time (defaults to the current local time)

        Returns:
            The resolved Intent. Never raises for a string input.
        """
        text = text if isinstance(text, str) else ("" if text is None else str(text))
        clock = ReferenceClock.capture(now)

        try:
            local = parse_locally(text, clock, self.config.parser)
            candidate = self.select(local, text, clock)
            return self._finish(self.correct(candidate, text, clock), text)
        except Exception:
            logger.exception(f"Unexpected failure resolving '{text[:60]}'")
            return self._last_resort(text)

    async def aresolve(self, text: str, now: Optional[datetime] = None) -> Intent:
        """Async variant of ``resolve`` for event-loop hosts."""
        text = text if isinstance(text, str) else ("" if text is None else str(text))
        clock = ReferenceClock.capture(now)

        try:
            local = parse_locally(text, clock, self.config.parser)
            candidate = await self.aselect(local, text, clock)
            return self._finish(self.correct(candidate, text, clock), text)
        except Exception:
            logger.exception(f"Unexpected failure resolving '{text[:60]}'")
            return self._last_resort(text)


def resolve_intent(
    text: str,
    now: Optional[datetime] = None,
    adapter: Optional[GenerativeFallbackAdapter] = None,
    config: Optional[NlcalConfig] = None,
) -> Intent:
    """
    Resolve a command in one call.

    The generative fallback runs only when an ``adapter`` is given; use
    ``IntentResolver.from_config()`` for the configured Ollama backend.
    """
    return IntentResolver(adapter=adapter, config=config).resolve(text, now)


async def aresolve_intent(
    text: str,
    now: Optional[datetime] = None,
    adapter: Optional[GenerativeFallbackAdapter] = None,
    config: Optional[NlcalConfig] = None,
) -> Intent:
    """Async variant of ``resolve_intent``."""
    return await IntentResolver(adapter=adapter, config=config).aresolve(text, now)
