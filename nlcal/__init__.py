"""
NLCal - Natural-Language Calendar Intent Engine
===============================================

Turns free-text calendar commands ("Gym tomorrow from 6pm to 8pm",
"delete lunch", "what's on my schedule") into structured intents.

Modules:
- core: Configuration, logging, errors and the Ollama client
- parsing: Normalizer, command classifier, temporal resolver, title
  extraction, local parser, generative fallback and arbitration
"""

__version__ = "1.0.0"
__author__ = "NLCal Project"

from .parsing import (
    AnswerIntent,
    DeleteIntent,
    EditIntent,
    EventIntent,
    Intent,
    IntentResolver,
    QueryIntent,
    ReferenceClock,
    TaskIntent,
    aresolve_intent,
    resolve_intent,
)

__all__ = [
    "AnswerIntent",
    "DeleteIntent",
    "EditIntent",
    "EventIntent",
    "Intent",
    "IntentResolver",
    "QueryIntent",
    "ReferenceClock",
    "TaskIntent",
    "aresolve_intent",
    "resolve_intent",
]
