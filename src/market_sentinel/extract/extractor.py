"""Turn generated text into validated market events."""

import json
import logging
import uuid
from collections.abc import Callable, Sequence
from datetime import UTC, datetime

from market_sentinel.data import ImpactType, MarketEvent, Severity, SourceLink, StockImpact
from market_sentinel.errors import ExtractionError
from market_sentinel.extract.payload import locate_payload
from market_sentinel.extract.policy import DefaultPolicy, default_policy

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(tz=UTC)


def _batch_prefix(now: datetime) -> str:
    """Id prefix shared by one extraction batch.

    The random token keeps two batches started in the same millisecond apart.
    """
    millis = int(now.timestamp() * 1000)
    return f"evt-{millis}-{uuid.uuid4().hex[:6]}"


class MarketEventExtractor:
    """Decode the JSON array embedded in model output into ``MarketEvent``s.

    Payload-level defects (nothing found, invalid JSON, not an array) raise
    ``ExtractionError``. Field-level defects fall back to the policy defaults
    and never abort the batch.

    Args:
        policy: Field defaulting rules (defaults to ``default_policy()``).
        clock: Source of the extraction time, used for ids and timestamps.
    """

    def __init__(
        self,
        policy: DefaultPolicy | None = None,
        *,
        clock: Callable[[], datetime] = _now,
    ) -> None:
        self._policy = policy or default_policy()
        self._clock = clock

    @property
    def policy(self) -> DefaultPolicy:
        return self._policy

    def extract(self, raw: str, citations: Sequence[SourceLink] = ()) -> list[MarketEvent]:
        """Extract events from ``raw``.

        Args:
            raw: Full generated text.
            citations: Batch-level citations; the first ``max_sources`` are
                attached to every event.

        Returns:
            Events in payload order.

        Raises:
            ExtractionError: If no JSON array can be decoded from ``raw``.
        """
        items = self.decode(raw)

        now = self._clock()
        prefix = _batch_prefix(now)
        timestamp = now.isoformat()
        sources = tuple(citations[: self._policy.max_sources])

        events: list[MarketEvent] = []
        for index, item in enumerate(items):
            if not isinstance(item, dict):
                logger.warning("Skipping non-object element %d: %r", index, item)
                continue
            events.append(
                self._to_event(
                    item,
                    event_id=f"{prefix}-{index}",
                    timestamp=timestamp,
                    sources=sources,
                )
            )
        return events

    def decode(self, raw: str) -> list[object]:
        """Locate and decode the top-level JSON array in ``raw``."""
        candidate = locate_payload(raw)
        if candidate is None or not candidate.strip():
            logger.error("No JSON payload found in model output. Raw: %s", raw)
            raise ExtractionError("empty payload", raw=raw, candidate=candidate)

        try:
            parsed = json.loads(candidate)
        except (ValueError, RecursionError) as e:
            logger.error("Failed to parse model JSON. Raw: %s Candidate: %s", raw, candidate)
            raise ExtractionError("malformed JSON", raw=raw, candidate=candidate) from e

        if not isinstance(parsed, list):
            logger.error("Model JSON is %s, not an array", type(parsed).__name__)
            raise ExtractionError("expected JSON array", raw=raw, candidate=candidate)
        return parsed

    def _to_event(
        self,
        item: dict[str, object],
        *,
        event_id: str,
        timestamp: str,
        sources: tuple[SourceLink, ...],
    ) -> MarketEvent:
        resolve = self._policy.resolve
        raw_stocks = item.get("affectedStocks")
        stocks: list[StockImpact] = []
        if isinstance(raw_stocks, list):
            for stock in raw_stocks:
                if isinstance(stock, dict):
                    stocks.append(self._to_stock(stock))

        return MarketEvent(
            id=event_id,
            title=resolve("title", item.get("title")),
            summary=resolve("summary", item.get("summary")),
            region=resolve("region", item.get("region")),
            timestamp=timestamp,
            severity=Severity(resolve("severity", item.get("severity"))),
            affected_stocks=tuple(stocks),
            sources=sources,
        )

    def _to_stock(self, raw: dict[str, object]) -> StockImpact:
        resolve = self._policy.resolve
        return StockImpact(
            symbol=resolve("symbol", raw.get("symbol")),
            name=resolve("name", raw.get("name")),
            impact=ImpactType(resolve("impact", raw.get("impact"))),
            reasoning=resolve("reasoning", raw.get("reasoning")),
        )
