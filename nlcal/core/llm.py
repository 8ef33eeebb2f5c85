"""
LLM client for NLCal.

The generative fallback talks to a local Ollama server. Only the
single-shot completion endpoint is used; the model is asked for a JSON
payload which the parsing layer then recovers and validates.
"""

from __future__ import annotations

import asyncio
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

import httpx
from loguru import logger
from ollama import AsyncClient, Client, ResponseError

from .errors import GenerativeTimeout, UpstreamError


class LLMProvider(Enum):
    """Supported LLM providers."""
    OLLAMA = "ollama"


@dataclass
class LLMResponse:
    """Response from an LLM."""
    content: str
    provider: LLMProvider
    model: str
    tokens_used: Optional[int] = None
    finish_reason: Optional[str] = None
    latency_ms: Optional[float] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


class BaseLLMClient(ABC):
    """Abstract base class for LLM clients."""

    def __init__(
        self,
        model: str,
        temperature: float = 0.1,
        max_tokens: int = 300,
        timeout_ms: int = 15000,
    ):
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout_ms = timeout_ms

    @property
    @abstractmethod
    def provider(self) -> LLMProvider:
        """Get the provider type."""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the provider is available."""
        pass

    @abstractmethod
    def generate(self, prompt: str, timeout_ms: Optional[int] = None) -> LLMResponse:
        """Generate a completion synchronously."""
        pass

    @abstractmethod
    async def agenerate(self, prompt: str, timeout_ms: Optional[int] = None) -> LLMResponse:
        """Generate a completion asynchronously."""
        pass


class OllamaClient(BaseLLMClient):
    """Ollama local LLM client."""

    def __init__(
        self,
        model: str = "qwen2.5:0.5b",
        base_url: str = "http://localhost:11434",
        temperature: float = 0.1,
        max_tokens: int = 300,
        top_p: float = 0.9,
        timeout_ms: int = 15000,
        client_kwargs: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize the Ollama client.

        Args:
            model: Model tag to run (e.g. "qwen2.5:0.5b", "llama3.2:1b")
            base_url: Ollama server URL
            temperature: Sampling temperature
            max_tokens: Maximum tokens to predict (num_predict)
            top_p: Nucleus sampling cutoff
            timeout_ms: Default request timeout in milliseconds
            client_kwargs: Extra keyword arguments for the underlying httpx client
        """
        super().__init__(model, temperature, max_tokens, timeout_ms)
        self.base_url = base_url.rstrip("/")
        self.top_p = top_p
        self.client_kwargs = dict(client_kwargs or {})
        self._clients: Dict[int, Client] = {}
        self._async_clients: Dict[int, AsyncClient] = {}

    @classmethod
    def from_config(cls, generative_config, **kwargs) -> "OllamaClient":
        """Build a client from a GenerativeConfig section."""
        return cls(
            model=generative_config.model,
            base_url=generative_config.base_url,
            temperature=generative_config.temperature,
            max_tokens=generative_config.num_predict,
            top_p=generative_config.top_p,
            timeout_ms=generative_config.timeout_ms,
            **kwargs,
        )

    @property
    def provider(self) -> LLMProvider:
        return LLMProvider.OLLAMA

    def _get_client(self, timeout_ms: int) -> Client:
        # ollama clients carry a fixed timeout, so keep one per value
        if timeout_ms not in self._clients:
            self._clients[timeout_ms] = Client(
                host=self.base_url,
                timeout=timeout_ms / 1000,
                **self.client_kwargs,
            )
        return self._clients[timeout_ms]

    def _get_async_client(self, timeout_ms: int) -> AsyncClient:
        if timeout_ms not in self._async_clients:
            self._async_clients[timeout_ms] = AsyncClient(
                host=self.base_url,
                timeout=timeout_ms / 1000,
                **self.client_kwargs,
            )
        return self._async_clients[timeout_ms]

    def _options(self) -> Dict[str, Any]:
        return {
            "temperature": self.temperature,
            "num_predict": self.max_tokens,
            "top_p": self.top_p,
        }

    def _to_response(self, raw: Any, started: float) -> LLMResponse:
        content = raw["response"] or ""
        latency_ms = (time.perf_counter() - started) * 1000
        logger.debug(f"Ollama responded in {latency_ms:.0f}ms: {content[:200]!r}")
        return LLMResponse(
            content=content,
            provider=self.provider,
            model=self.model,
            tokens_used=raw.get("eval_count"),
            finish_reason="stop",
            latency_ms=latency_ms,
        )

    def is_available(self) -> bool:
        try:
            transport_kwargs = {k: v for k, v in self.client_kwargs.items() if k == "transport"}
            with httpx.Client(timeout=5, **transport_kwargs) as client:
                response = client.get(f"{self.base_url}/api/tags")
            return response.status_code == 200
        except httpx.HTTPError:
            return False

    def generate(self, prompt: str, timeout_ms: Optional[int] = None) -> LLMResponse:
        timeout_ms = timeout_ms or self.timeout_ms
        client = self._get_client(timeout_ms)
        started = time.perf_counter()

        try:
            raw = client.generate(
                model=self.model,
                prompt=prompt,
                stream=False,
                options=self._options(),
            )
        except httpx.TimeoutException as e:
            raise GenerativeTimeout(timeout_ms) from e
        except ResponseError as e:
            raise UpstreamError(f"Ollama request failed: {e.status_code}", e.status_code) from e
        except (httpx.HTTPError, ConnectionError) as e:
            raise UpstreamError(f"Ollama unreachable at {self.base_url}: {e}") from e

        return self._to_response(raw, started)

    async def agenerate(self, prompt: str, timeout_ms: Optional[int] = None) -> LLMResponse:
        timeout_ms = timeout_ms or self.timeout_ms
        client = self._get_async_client(timeout_ms)
        started = time.perf_counter()

        try:
            raw = await asyncio.wait_for(
                client.generate(
                    model=self.model,
                    prompt=prompt,
                    stream=False,
                    options=self._options(),
                ),
                timeout=timeout_ms / 1000,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise GenerativeTimeout(timeout_ms) from e
        except ResponseError as e:
            raise UpstreamError(f"Ollama request failed: {e.status_code}", e.status_code) from e
        except (httpx.HTTPError, ConnectionError) as e:
            raise UpstreamError(f"Ollama unreachable at {self.base_url}: {e}") from e

        return self._to_response(raw, started)
