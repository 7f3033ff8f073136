"""
Common utilities shared across MoralBook modules.
"""

from .cache import NullCache, TTLCache
from .concurrency import DEFAULT_MAX_CONCURRENT, SettledResult, run_bounded
from .llm import ChatResult, CompletionCallable, call_chat_completion

__all__ = [
    "ChatResult",
    "CompletionCallable",
    "call_chat_completion",
    "DEFAULT_MAX_CONCURRENT",
    "SettledResult",
    "run_bounded",
    "NullCache",
    "TTLCache",
]
