"""
Generative fallback adapter.

Used only when the local parser finds neither a command nor a time.
Builds a prompt, calls the text model under a timeout and recovers a JSON
payload from whatever prose the model wraps it in.

Failure modes (all subclasses of GenerativeError):
- GenerativeTimeout: the call took longer than the timeout
- UpstreamError: non-success response or unreachable service
- MalformedOutput: no JSON object could be recovered
"""

from __future__ import annotations

import asyncio
import json
import re
import time as time_module
from datetime import datetime, time, timedelta
from typing import Any, Dict, Optional

from loguru import logger

from ..core.config import ParserConfig
from ..core.errors import GenerativeError, GenerativeTimeout, MalformedOutput, UpstreamError
from ..core.llm import BaseLLMClient
from .clock import ReferenceClock
from .intents import (
    UNRECOGNIZED_MESSAGE,
    AnswerIntent,
    DeleteIntent,
    EditIntent,
    EventIntent,
    Intent,
    QueryIntent,
    TaskIntent,
)
from .normalizer import canonicalize
from .temporal import mentions_tomorrow
from .titles import extract_title, strip_task_verbs

DEFAULT_TIMEOUT_MS = 15000

PROMPT_TEMPLATE = """You are a calendar assistant.
Current date: {today} ({weekday}).
Tomorrow is: {tomorrow} ({tomorrow_weekday}).

Turn the user command into JSON.

RULES:
1. Give the event title on its own, without times or dates.
2. "from 6pm to 8pm" means start 18:00 and end 20:00.
3. Without an end time the event lasts 1 hour.
4. "tomorrow" means the date {tomorrow}.

User command: "{text}"

Answer with exactly one of these JSON shapes:

TYPE: EVENT
{{"type":"event","title":"Gym","start":"{today}T18:00:00","end":"{today}T20:00:00"}}
(for "Gym from 6pm to 8pm")

TYPE: TASK (no specific time)
{{"type":"task","task":"Buy groceries"}}

TYPE: DELETE
{{"type":"delete","target":"Gym"}}

TYPE: EDIT
{{"type":"edit","target":"Gym","changes":{{"newTime":"18:00"}}}}

Return ONLY the JSON. Do not explain."""

FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)
TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")
SINGLE_QUOTED_RE = re.compile(r"(?<=[{\[,:])(\s*)'((?:[^'\\]|\\.)*)'(?=\s*[,:}\]])")
UNQUOTED_KEY_RE = re.compile(r"([{,]\s*)([A-Za-z_][A-Za-z0-9_]*)\s*:")

# Closing braces tried per opening brace before giving up on it
MAX_CLOSE_CANDIDATES = 8

NULL_TITLES = {"", "null", "none", "undefined"}


def build_prompt(text: str, clock: ReferenceClock) -> str:
    """Prompt for the model, anchored to the request's reference dates."""
    return PROMPT_TEMPLATE.format(
        today=clock.today_str,
        weekday=clock.weekday,
        tomorrow=clock.tomorrow_str,
        tomorrow_weekday=clock.tomorrow_weekday,
        text=text.strip().replace('"', "'"),
    )


# =============================================================================
# JSON recovery
# =============================================================================

def _requote(match: re.Match) -> str:
    return match.group(1) + json.dumps(match.group(2).replace("\\'", "'"))


def repair_json(text: str) -> str:
    """Lenient fixes: trailing commas, single quotes, bare keys."""
    repaired = TRAILING_COMMA_RE.sub(r"\1", text.strip())
    repaired = SINGLE_QUOTED_RE.sub(_requote, repaired)
    repaired = UNQUOTED_KEY_RE.sub(r'\1"\2":', repaired)
    return repaired


def _try_load_object(text: str) -> Optional[Dict[str, Any]]:
    for candidate in (text, repair_json(text)):
        try:
            value = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(value, dict):
            return value
    return None


def _scan_first_object(text: str) -> Optional[Dict[str, Any]]:
    decoder = json.JSONDecoder()
    for index, char in enumerate(text):
        if char != "{":
            continue
        fragment = text[index:]
        try:
            value, _ = decoder.raw_decode(fragment)
        except json.JSONDecodeError:
            value = None
        if isinstance(value, dict):
            return value

        close_count = 0
        for end_index, fragment_char in enumerate(fragment):
            if fragment_char != "}":
                continue
            close_count += 1
            value = _try_load_object(fragment[: end_index + 1])
            if value is not None:
                return value
            if close_count >= MAX_CLOSE_CANDIDATES:
                # Deeply nested: give this brace its widest span before moving inward
                value = _try_load_object(fragment[: fragment.rindex("}") + 1])
                if value is not None:
                    return value
                break
    return None


def extract_json(raw: str) -> Dict[str, Any]:
    """
    Recover the JSON object embedded in model output.

    A fenced code block wins when present; otherwise the first object in
    the text is used. Lenient repairs are applied before giving up.

    Args:
        raw: Model output

    Returns:
        The decoded object.

    Raises:
        MalformedOutput: No JSON object could be recovered.
    """
    text = raw or ""
    fenced = FENCE_RE.search(text)
    if fenced:
        text = fenced.group(1).strip()

    payload = _scan_first_object(text)
    if payload is None and "{" in text and "}" in text:
        payload = _try_load_object(text[text.index("{"): text.rindex("}") + 1])

    if payload is None:
        raise MalformedOutput("No JSON object found in model output", raw=raw or "")
    return payload


# =============================================================================
# Payload -> Intent
# =============================================================================

def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp from the model; None when unusable."""
    if not isinstance(value, str) or not value.strip():
        return None
    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    # Timestamps are wall-clock values in the user's own zone
    return parsed.replace(tzinfo=None, microsecond=0)


def default_start(
    raw_text: str,
    clock: ReferenceClock,
    parser_config: Optional[ParserConfig] = None,
) -> datetime:
    """Start used when the model gave none or an invalid one."""
    parser_config = parser_config or ParserConfig()
    if mentions_tomorrow(raw_text):
        return datetime.combine(clock.tomorrow, time(parser_config.default_tomorrow_hour, 0))
    return (clock.now + timedelta(hours=1)).replace(second=0)


def candidate_to_intent(
    payload: Dict[str, Any],
    raw_text: str,
    clock: ReferenceClock,
    fallback_start: Optional[datetime] = None,
    parser_config: Optional[ParserConfig] = None,
) -> Intent:
    """
    Map a model payload onto an Intent, repairing missing fields.

    Args:
        payload: Object recovered from the model output
        raw_text: The user's original command
        clock: Reference clock for this request
        fallback_start: Start used when the payload has no usable one;
            computed with ``default_start`` when omitted
        parser_config: Heuristic tuning (defaults apply when omitted)

    Returns:
        An Intent; unknown payload types become an Answer.
    """
    parser_config = parser_config or ParserConfig()
    kind = str(payload.get("type") or "").strip().lower()
    canonical = canonicalize(raw_text)

    if kind == "event":
        title = payload.get("title")
        if not isinstance(title, str) or title.strip().lower() in NULL_TITLES:
            title = extract_title(canonical, placeholder=parser_config.placeholder_title)

        start = parse_timestamp(payload.get("start"))
        if start is None:
            logger.debug(f"Model start {payload.get('start')!r} unusable, using default")
            start = fallback_start or default_start(raw_text, clock, parser_config)

        return EventIntent.build(
            title,
            start,
            parse_timestamp(payload.get("end")),
            duration=timedelta(minutes=parser_config.default_duration_minutes),
            placeholder=parser_config.placeholder_title,
        )

    if kind == "task":
        description = payload.get("task") or payload.get("description")
        if not isinstance(description, str) or not description.strip():
            description = strip_task_verbs(canonical) or canonical
        return TaskIntent(description=description.strip())

    if kind == "delete":
        target = str(payload.get("target") or "").strip().lower()
        return DeleteIntent(target=target or "event")

    if kind == "edit":
        target = str(payload.get("target") or "").strip().lower()
        raw_changes = payload.get("changes")
        changes = {}
        if isinstance(raw_changes, dict):
            changes = {str(k): str(v) for k, v in raw_changes.items() if v is not None}
        return EditIntent(target=target or "event", changes=changes)

    if kind == "query":
        question = payload.get("question")
        if not isinstance(question, str) or not question.strip():
            question = canonical
        return QueryIntent(question=question)

    if kind == "answer" and isinstance(payload.get("message"), str) and payload["message"].strip():
        return AnswerIntent(message=payload["message"].strip())

    logger.debug(f"Unrecognized model payload type {kind!r}")
    return AnswerIntent(message=UNRECOGNIZED_MESSAGE)


# =============================================================================
# Adapter
# =============================================================================

class GenerativeFallbackAdapter:
    """
    Calls a text model and returns the JSON payload it produced.

    One attempt per call, no retries; the local parser is the safety net.
    """

    def __init__(self, client: BaseLLMClient, timeout_ms: int = DEFAULT_TIMEOUT_MS):
        self.client = client
        self.timeout_ms = timeout_ms

    def call_model(self, prompt: str, timeout_ms: Optional[int] = None) -> Dict[str, Any]:
        """
        Run the model synchronously.

        Raises:
            GenerativeTimeout, UpstreamError, MalformedOutput
        """
        timeout_ms = timeout_ms or self.timeout_ms
        started = time_module.monotonic()

        try:
            response = self.client.generate(prompt, timeout_ms=timeout_ms)
        except GenerativeError:
            raise
        except Exception as e:
            raise UpstreamError(f"Generation failed: {e}") from e

        elapsed_ms = (time_module.monotonic() - started) * 1000
        if elapsed_ms > timeout_ms:
            raise GenerativeTimeout(timeout_ms)

        logger.debug(f"📝 Raw AI response: {response.content[:200]!r}")
        return extract_json(response.content)

    async def acall_model(self, prompt: str, timeout_ms: Optional[int] = None) -> Dict[str, Any]:
        """Async variant of ``call_model``; the timeout cancels the call."""
        timeout_ms = timeout_ms or self.timeout_ms

        try:
            response = await asyncio.wait_for(
                self.client.agenerate(prompt, timeout_ms=timeout_ms),
                timeout=timeout_ms / 1000,
            )
        except asyncio.TimeoutError as e:
            raise GenerativeTimeout(timeout_ms) from e
        except GenerativeError:
            raise
        except Exception as e:
            raise UpstreamError(f"Generation failed: {e}") from e

        logger.debug(f"📝 Raw AI response: {response.content[:200]!r}")
        return extract_json(response.content)
