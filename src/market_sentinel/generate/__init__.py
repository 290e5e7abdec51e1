"""Text generation backends."""

from market_sentinel.generate.base import TextGenerator
from market_sentinel.generate.claude import ClaudeGenerator

__all__ = [
    "ClaudeGenerator",
    "TextGenerator",
]
