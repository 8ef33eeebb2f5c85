"""Core modules for NLCal."""

from .config import (
    CONFIG_DIR,
    PROJECT_ROOT,
    GenerativeConfig,
    NlcalConfig,
    ParserConfig,
    config,
    get_config,
    reset_config,
)
from .errors import (
    ConfigurationError,
    GenerativeError,
    GenerativeTimeout,
    MalformedOutput,
    UpstreamError,
    describe_error,
)
from .llm import BaseLLMClient, LLMProvider, LLMResponse, OllamaClient
from .logger import setup_logging

__all__ = [
    "CONFIG_DIR",
    "PROJECT_ROOT",
    "GenerativeConfig",
    "NlcalConfig",
    "ParserConfig",
    "config",
    "get_config",
    "reset_config",
    "ConfigurationError",
    "GenerativeError",
    "GenerativeTimeout",
    "MalformedOutput",
    "UpstreamError",
    "describe_error",
    "BaseLLMClient",
    "LLMProvider",
    "LLMResponse",
    "OllamaClient",
    "setup_logging",
]
