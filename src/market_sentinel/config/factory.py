"""Factory functions to create components from configuration."""

import os
from pathlib import Path

from market_sentinel.config.models import (
    ClaudeGeneratorConfig,
    DispatchConfig,
    ExtractionConfig,
    MarketSentinelConfig,
)
from market_sentinel.data import ToolConfig
from market_sentinel.dispatch.dispatcher import FallbackDispatcher, TransientPolicy
from market_sentinel.extract.extractor import MarketEventExtractor
from market_sentinel.extract.policy import default_policy
from market_sentinel.generate.base import TextGenerator
from market_sentinel.generate.claude import ClaudeGenerator
from market_sentinel.run_logger import RunLogger
from market_sentinel.service import MarketIntelligenceService


def create_generator(config: ClaudeGeneratorConfig) -> TextGenerator:
    """Create a text generator from config.

    Uses explicit type matching rather than getattr.
    """
    if isinstance(config, ClaudeGeneratorConfig):
        return ClaudeGenerator(api_key=os.environ.get(config.api_key_env))
    msg = f"Unknown generator config type: {type(config)}"
    raise ValueError(msg)


def create_dispatcher(config: DispatchConfig, generator: TextGenerator) -> FallbackDispatcher:
    """Create a fallback dispatcher around ``generator``."""
    policy = TransientPolicy(
        status_codes=frozenset(config.transient_status_codes),
        markers=tuple(config.transient_markers),
    )
    return FallbackDispatcher(generator, policy=policy)


def create_extractor(config: ExtractionConfig) -> MarketEventExtractor:
    """Create an event extractor with the configured field defaults."""
    policy = default_policy(
        region=config.default_region,
        severity=config.default_severity,
        impact=config.default_impact,
        max_sources=config.max_sources,
    )
    return MarketEventExtractor(policy)


def create_service(
    config: MarketSentinelConfig,
    *,
    generator: TextGenerator | None = None,
    run_logger: RunLogger | None = None,
) -> MarketIntelligenceService:
    """Create the service from config.

    Args:
        config: Root configuration.
        generator: Use this generator instead of the configured one.
        run_logger: Optional RunLogger for per-operation logs.
    """
    generator = generator or create_generator(config.generator)
    dispatcher = create_dispatcher(config.dispatch, generator)
    return MarketIntelligenceService(
        dispatcher,
        create_extractor(config.extraction),
        primary_model=config.models.primary,
        fallback_model=config.models.fallback,
        notification_model=config.models.notification,
        tool_config=ToolConfig(
            web_search=config.search.web_search,
            max_searches=config.search.max_searches,
            max_tokens=config.search.max_tokens,
        ),
        language=config.prompts.language,
        default_keywords=config.prompts.default_keywords,
        trend_count=config.prompts.trend_count,
        run_logger=run_logger,
    )


def create_from_config(
    config: MarketSentinelConfig,
    *,
    log_override: bool | None = None,
    log_dir_override: str | None = None,
) -> tuple[MarketIntelligenceService, RunLogger | None]:
    """Create a complete service from root config.

    Args:
        config: Root configuration.
        log_override: Override the config's logging.enabled setting.
        log_dir_override: Override the config's logging.log_dir setting.

    Returns:
        Tuple of (service, run_logger).
        run_logger is None if logging is disabled.
    """
    log_enabled = log_override if log_override is not None else config.logging.enabled
    log_dir = Path(log_dir_override if log_dir_override is not None else config.logging.log_dir)

    run_logger: RunLogger | None = None
    if log_enabled:
        run_logger = RunLogger(log_dir=log_dir, enabled=True)

    service = create_service(config, run_logger=run_logger)
    return (service, run_logger)
