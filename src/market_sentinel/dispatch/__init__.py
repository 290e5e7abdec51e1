"""Request dispatch with one-shot model fallback."""

from market_sentinel.dispatch.dispatcher import (
    FailureKind,
    FallbackDispatcher,
    TransientPolicy,
    classify_failure,
    failure_status,
)

__all__ = [
    "FailureKind",
    "FallbackDispatcher",
    "TransientPolicy",
    "classify_failure",
    "failure_status",
]
