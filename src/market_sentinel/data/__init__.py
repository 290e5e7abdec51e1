"""Data models for Market Sentinel."""

from market_sentinel.data.models import (
    APICallUsage,
    DispatchState,
    GenerationRequest,
    GenerationResult,
    ImpactType,
    MarketEvent,
    Severity,
    SourceLink,
    StockImpact,
    ToolConfig,
)

__all__ = [
    "APICallUsage",
    "DispatchState",
    "GenerationRequest",
    "GenerationResult",
    "ImpactType",
    "MarketEvent",
    "Severity",
    "SourceLink",
    "StockImpact",
    "ToolConfig",
]
