"""Core data models for Market Sentinel."""

from dataclasses import dataclass, field
from enum import StrEnum


class Severity(StrEnum):
    """How strongly an event is expected to move the market."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class ImpactType(StrEnum):
    """Expected direction of an event's effect on a single instrument."""

    BULLISH = "BULLISH"
    BEARISH = "BEARISH"
    NEUTRAL = "NEUTRAL"
    VOLATILE = "VOLATILE"


class DispatchState(StrEnum):
    """States of the two-attempt dispatch state machine.

    ``PRIMARY_ATTEMPT`` leads to ``SUCCESS``, ``FATAL_FAILURE`` or
    ``TRANSIENT_FAILURE``. Only ``TRANSIENT_FAILURE`` leads to
    ``FALLBACK_ATTEMPT``, which ends in ``SUCCESS`` or ``FAILURE``.
    """

    PRIMARY_ATTEMPT = "primary_attempt"
    TRANSIENT_FAILURE = "transient_failure"
    FALLBACK_ATTEMPT = "fallback_attempt"
    FATAL_FAILURE = "fatal_failure"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class SourceLink:
    """A citation returned alongside generated text."""

    title: str
    uri: str


@dataclass(frozen=True)
class ToolConfig:
    """Generation options handed to the text generator unchanged."""

    web_search: bool = True
    max_searches: int = 5
    max_tokens: int = 4096


@dataclass(frozen=True)
class GenerationRequest:
    """A prompt plus the primary/fallback model pair to run it against."""

    prompt_text: str
    primary_model: str
    fallback_model: str
    tool_config: ToolConfig = field(default_factory=ToolConfig)


@dataclass(frozen=True)
class APICallUsage:
    """Usage from a single API call."""

    model: str
    input_tokens: int = 0
    output_tokens: int = 0
    web_searches: int = 0


@dataclass(frozen=True)
class GenerationResult:
    """Text payload and citations produced by one successful generation."""

    text: str
    citations: tuple[SourceLink, ...] = ()
    model: str = ""
    usage: APICallUsage | None = None
    dispatch_path: tuple[DispatchState, ...] = ()


@dataclass(frozen=True)
class StockImpact:
    """An instrument affected by a market event."""

    symbol: str
    name: str
    impact: ImpactType = ImpactType.NEUTRAL
    reasoning: str = ""


@dataclass(frozen=True)
class MarketEvent:
    """A validated market-moving event extracted from model output.

    ``id`` and ``timestamp`` are assigned at extraction time. ``sources`` are
    the batch-level citations, shared by every event of one extraction.
    """

    id: str
    title: str
    summary: str
    region: str
    timestamp: str
    severity: Severity = Severity.MEDIUM
    affected_stocks: tuple[StockImpact, ...] = ()
    sources: tuple[SourceLink, ...] = ()
