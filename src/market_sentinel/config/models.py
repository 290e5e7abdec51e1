"""Pydantic configuration models for Market Sentinel components."""

from typing import Literal

from pydantic import BaseModel, Field

from market_sentinel.data import ImpactType, Severity

# ============================================================
# Generator Configs
# ============================================================


class ClaudeGeneratorConfig(BaseModel):
    """Configuration for ClaudeGenerator."""

    type: Literal["claude"] = "claude"
    api_key_env: str = "CLAUDE_API_KEY"

    model_config = {"frozen": True}


# ============================================================
# Request Configs
# ============================================================


class ModelsConfig(BaseModel):
    """Model identifiers used by the service."""

    primary: str = "claude-sonnet-4-5-20250929"
    fallback: str = "claude-haiku-4-5-20251001"
    notification: str = "claude-haiku-4-5-20251001"

    model_config = {"frozen": True}


class SearchConfig(BaseModel):
    """Tool options for intelligence and trend requests."""

    web_search: bool = True
    max_searches: int = Field(default=5, ge=1)
    max_tokens: int = Field(default=4096, ge=1)

    model_config = {"frozen": True}


class DispatchConfig(BaseModel):
    """Which upstream failures trigger the one-shot fallback."""

    transient_status_codes: list[int] = Field(default_factory=lambda: [500, 503])
    transient_markers: list[str] = Field(
        default_factory=lambda: ["internal error", "internal server error"]
    )

    model_config = {"frozen": True}


# ============================================================
# Extraction Config
# ============================================================


class ExtractionConfig(BaseModel):
    """Field defaults applied to incomplete model output."""

    default_region: str = "Global"
    default_severity: Severity = Severity.MEDIUM
    default_impact: ImpactType = ImpactType.NEUTRAL
    max_sources: int = Field(default=3, ge=0)

    model_config = {"frozen": True}


# ============================================================
# Prompt Config
# ============================================================


class PromptConfig(BaseModel):
    """Prompt wording options."""

    language: str = "English"
    default_keywords: list[str] = Field(
        default_factory=lambda: ["macroeconomics", "geopolitics"]
    )
    trend_count: int = Field(default=10, ge=1)

    model_config = {"frozen": True}


# ============================================================
# Logging Config
# ============================================================


class LoggingConfig(BaseModel):
    """Configuration for per-operation run logging."""

    enabled: bool = False
    log_dir: str = "logs"

    model_config = {"frozen": True}


# ============================================================
# Root Config
# ============================================================


class MarketSentinelConfig(BaseModel):
    """Root configuration for Market Sentinel."""

    generator: ClaudeGeneratorConfig = Field(default_factory=ClaudeGeneratorConfig)
    models: ModelsConfig = Field(default_factory=ModelsConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    dispatch: DispatchConfig = Field(default_factory=DispatchConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    prompts: PromptConfig = Field(default_factory=PromptConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}
