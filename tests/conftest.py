"""
Shared fixtures for the NLCal tests.

Provides:
- fixed reference times (2024-06-01 is a Saturday)
- FakeLLMClient, a scripted stand-in for the Ollama client
"""

import asyncio
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from nlcal.core.llm import BaseLLMClient, LLMProvider, LLMResponse
from nlcal.parsing import GenerativeFallbackAdapter, ReferenceClock


class FakeLLMClient(BaseLLMClient):
    """Returns a canned reply, raises a canned error, or sleeps."""

    def __init__(self, reply: str = "", error: Optional[Exception] = None, delay: float = 0.0):
        super().__init__(model="fake-model")
        self.reply = reply
        self.error = error
        self.delay = delay
        self.prompts: List[str] = []

    @property
    def provider(self) -> LLMProvider:
        return LLMProvider.OLLAMA

    def is_available(self) -> bool:
        return True

    def _respond(self, prompt: str) -> LLMResponse:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return LLMResponse(content=self.reply, provider=self.provider, model=self.model)

    def generate(self, prompt: str, timeout_ms: Optional[int] = None) -> LLMResponse:
        if self.delay:
            time.sleep(self.delay)
        return self._respond(prompt)

    async def agenerate(self, prompt: str, timeout_ms: Optional[int] = None) -> LLMResponse:
        if self.delay:
            await asyncio.sleep(self.delay)
        return self._respond(prompt)


@pytest.fixture
def morning():
    """Saturday 2024-06-01 08:00."""
    return datetime(2024, 6, 1, 8, 0)


@pytest.fixture
def evening():
    """Saturday 2024-06-01 20:00."""
    return datetime(2024, 6, 1, 20, 0)


@pytest.fixture
def clock(morning):
    return ReferenceClock.from_datetime(morning)


@pytest.fixture
def make_adapter():
    """Build an adapter around a FakeLLMClient; returns (adapter, client)."""

    def _make(reply: str = "", error: Optional[Exception] = None, delay: float = 0.0, timeout_ms: int = 15000):
        client = FakeLLMClient(reply=reply, error=error, delay=delay)
        return GenerativeFallbackAdapter(client, timeout_ms=timeout_ms), client

    return _make
