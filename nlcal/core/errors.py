"""
Centralized Error Handling for NLCal.

Provides:
- Exception types for the generative fallback path
- User-friendly error messages
- Configuration guidance
"""

from typing import Dict, Optional

from loguru import logger


class ConfigurationError(Exception):
    """Raised when the configuration file or environment is invalid."""
    pass


class GenerativeError(Exception):
    """Base class for failures of the generative fallback path."""
    pass


class GenerativeTimeout(GenerativeError):
    """The text-generation call exceeded its timeout."""

    def __init__(self, timeout_ms: int):
        super().__init__(f"AI request timed out after {timeout_ms}ms")
        self.timeout_ms = timeout_ms


class UpstreamError(GenerativeError):
    """The text-generation service answered with a non-success response or was unreachable."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedOutput(GenerativeError):
    """No JSON object could be recovered from the model output."""

    def __init__(self, message: str, raw: str = ""):
        super().__init__(message)
        self.raw = raw


# User-friendly error messages with setup instructions
ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "ollama_unreachable": {
        "short": "Ollama is not reachable",
        "detailed": """The local Ollama server could not be reached.

To enable the AI fallback:
1. Install Ollama from ollama.com
2. Start it with: ollama serve
3. Pull the model: ollama pull qwen2.5:0.5b
4. Optionally set OLLAMA_BASE_URL in your .env file

Commands with an explicit time still work without it.""",
    },
    "ollama_model": {
        "short": "AI model not available",
        "detailed": """The configured model is not installed in Ollama.

Pull it with:
   ollama pull <model>

or set AI_MODEL in your .env file to a model you have.""",
    },
    "timeout": {
        "short": "AI request timed out",
        "detailed": """The AI model took too long to answer.

Try a smaller model (qwen2.5:0.5b or llama3.2:1b) or raise
generative.timeout_ms in config/settings.yaml.""",
    },
    "malformed": {
        "short": "AI answer could not be read",
        "detailed": """The AI model answered, but not with usable JSON.

The local parser result was used instead. Small models do this
occasionally; a larger model is usually more reliable.""",
    },
}


def get_error_message(error_key: str, detailed: bool = False) -> str:
    """
    Get user-friendly error message.

    Args:
        error_key: Key for the error type
        detailed: Whether to return detailed message with setup instructions

    Returns:
        User-friendly error message
    """
    if error_key not in ERROR_MESSAGES:
        return f"An error occurred: {error_key}"

    msg = ERROR_MESSAGES[error_key]
    return msg["detailed"] if detailed else msg["short"]


def error_key_for(error: Exception) -> Optional[str]:
    """Map an exception onto an ERROR_MESSAGES key."""
    if isinstance(error, GenerativeTimeout):
        return "timeout"
    if isinstance(error, MalformedOutput):
        return "malformed"
    if isinstance(error, UpstreamError):
        if error.status_code == 404:
            return "ollama_model"
        return "ollama_unreachable"
    return None


def describe_error(error: Exception, detailed: bool = False) -> str:
    """
    Describe an error in user-friendly terms.

    Args:
        error: The exception that occurred
        detailed: Whether to include setup instructions

    Returns:
        User-friendly error message
    """
    key = error_key_for(error)
    if key is None:
        logger.debug(f"No friendly message for {type(error).__name__}: {error}")
        return f"An error occurred: {error}"
    return get_error_message(key, detailed=detailed)
