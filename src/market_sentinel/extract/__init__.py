"""Structured extraction of market events from generated text."""

from market_sentinel.extract.extractor import MarketEventExtractor
from market_sentinel.extract.payload import locate_payload
from market_sentinel.extract.policy import DefaultPolicy, FieldPolicy, default_policy

__all__ = [
    "DefaultPolicy",
    "FieldPolicy",
    "MarketEventExtractor",
    "default_policy",
    "locate_payload",
]
