"""Market Sentinel: market-moving event intelligence from generative models."""

from market_sentinel.config import MarketSentinelConfig, create_from_config, load_config
from market_sentinel.config.factory import create_service
from market_sentinel.data import (
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
from market_sentinel.dispatch import FailureKind, FallbackDispatcher, TransientPolicy
from market_sentinel.errors import ExtractionError, MarketSentinelError, UpstreamError
from market_sentinel.extract import (
    DefaultPolicy,
    FieldPolicy,
    MarketEventExtractor,
    default_policy,
    locate_payload,
)
from market_sentinel.generate import ClaudeGenerator, TextGenerator
from market_sentinel.run_logger import RunLogger
from market_sentinel.service import MarketIntelligenceService

__all__ = [
    # Models
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
    # Errors
    "ExtractionError",
    "MarketSentinelError",
    "UpstreamError",
    # Protocols
    "TextGenerator",
    # Generators
    "ClaudeGenerator",
    # Dispatch
    "FailureKind",
    "FallbackDispatcher",
    "TransientPolicy",
    # Extraction
    "DefaultPolicy",
    "FieldPolicy",
    "MarketEventExtractor",
    "default_policy",
    "locate_payload",
    # Service
    "MarketIntelligenceService",
    # Logging
    "RunLogger",
    # Config
    "MarketSentinelConfig",
    "create_from_config",
    "create_service",
    "load_config",
]
