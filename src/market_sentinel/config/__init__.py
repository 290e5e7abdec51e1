"""Configuration module for Market Sentinel."""

from market_sentinel.config.factory import create_from_config
from market_sentinel.config.loader import get_default_config_path, load_config
from market_sentinel.config.models import (
    ClaudeGeneratorConfig,
    DispatchConfig,
    ExtractionConfig,
    LoggingConfig,
    MarketSentinelConfig,
    ModelsConfig,
    PromptConfig,
    SearchConfig,
)

__all__ = [
    "ClaudeGeneratorConfig",
    "DispatchConfig",
    "ExtractionConfig",
    "LoggingConfig",
    "MarketSentinelConfig",
    "ModelsConfig",
    "PromptConfig",
    "SearchConfig",
    "create_from_config",
    "get_default_config_path",
    "load_config",
]
