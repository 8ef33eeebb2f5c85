"""
Intent types produced by the parsing pipeline.

An intent is a transient, fully resolved parse result. Variants are
frozen dataclasses; pipeline stages derive new values with
``dataclasses.replace`` instead of mutating earlier candidates.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, ClassVar, Dict, Mapping, Optional, Union

PLACEHOLDER_TITLE = "New Event"
DEFAULT_DURATION = timedelta(minutes=60)

USAGE_HINT = "Try: 'Meeting at 3pm' or 'Add task: Buy groceries'"
BLANK_INPUT_MESSAGE = f"Please type a command. {USAGE_HINT}"
UNRECOGNIZED_MESSAGE = f"I understood that, but I'm not sure what to do. {USAGE_HINT}"


def format_timestamp(value: datetime) -> str:
    """Canonical wire format: YYYY-MM-DDTHH:MM:SS."""
    return value.isoformat(timespec="seconds")


def order_end(
    start: datetime,
    end: Optional[datetime],
    duration: timedelta = DEFAULT_DURATION,
) -> datetime:
    """
    Return an end strictly after ``start``.

    An end earlier in the day than the start on the same date is read as
    crossing midnight ("9pm to 1am"); anything else that does not follow
    the start falls back to the default duration.
    """
    if end is None:
        return start + duration
    if end > start:
        return end
    if end.date() == start.date() and end.time() < start.time():
        return end + timedelta(days=1)
    return start + duration


@dataclass(frozen=True)
class EventIntent:
    """A calendar event with concrete start and end."""
    kind: ClassVar[str] = "event"

    title: str
    start: datetime
    end: datetime

    def __post_init__(self):
        if not self.title:
            raise ValueError("Event title must not be empty")
        if self.end <= self.start:
            raise ValueError(f"Event end {self.end} is not after start {self.start}")

    @classmethod
    def build(
        cls,
        title: Optional[str],
        start: datetime,
        end: Optional[datetime] = None,
        duration: timedelta = DEFAULT_DURATION,
        placeholder: str = PLACEHOLDER_TITLE,
    ) -> "EventIntent":
        """Create an event, repairing an empty title and an unordered end."""
        title = (title or "").strip() or placeholder
        return cls(title=title, start=start, end=order_end(start, end, duration))

    @property
    def message(self) -> str:
        return f'📅 Scheduled "{self.title}"'

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.kind,
            "title": self.title,
            "start": format_timestamp(self.start),
            "end": format_timestamp(self.end),
            "message": self.message,
        }


@dataclass(frozen=True)
class TaskIntent:
    """A to-do item without a time."""
    kind: ClassVar[str] = "task"

    description: str

    @property
    def message(self) -> str:
        return f'📝 Added task: "{self.description}"'

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind, "description": self.description, "message": self.message}


@dataclass(frozen=True)
class DeleteIntent:
    """Delete the event(s) whose title matches ``target``."""
    kind: ClassVar[str] = "delete"

    target: str

    @property
    def message(self) -> str:
        return f'🗑️ Looking for "{self.target}" to delete...'

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind, "target": self.target, "message": self.message}


@dataclass(frozen=True)
class EditIntent:
    """Edit the event matching ``target``; ``changes`` may be empty."""
    kind: ClassVar[str] = "edit"

    target: str
    changes: Mapping[str, str] = field(default_factory=dict)

    @property
    def message(self) -> str:
        return f'✏️ Editing "{self.target}"...'

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.kind,
            "target": self.target,
            "changes": dict(self.changes),
            "message": self.message,
        }


@dataclass(frozen=True)
class QueryIntent:
    """A question about the user's schedule."""
    kind: ClassVar[str] = "query"

    question: str

    @property
    def message(self) -> str:
        return "🔍 Checking your calendar..."

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind, "question": self.question, "message": self.message}


@dataclass(frozen=True)
class AnswerIntent:
    """Terminal informational reply; nothing to execute."""
    kind: ClassVar[str] = "answer"

    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind, "message": self.message}


Intent = Union[EventIntent, TaskIntent, DeleteIntent, EditIntent, QueryIntent, AnswerIntent]

COMMAND_INTENTS = (DeleteIntent, EditIntent, QueryIntent)
