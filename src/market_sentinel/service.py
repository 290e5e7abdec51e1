"""Market intelligence operations: prompt, dispatch, extract."""

import asyncio
import dataclasses
import logging
import time
from collections.abc import Sequence
from typing import Any

from market_sentinel.data import GenerationRequest, GenerationResult, MarketEvent, ToolConfig
from market_sentinel.dispatch.dispatcher import FallbackDispatcher
from market_sentinel.errors import MarketSentinelError
from market_sentinel.extract.extractor import MarketEventExtractor
from market_sentinel.prompts import (
    DEFAULT_KEYWORDS,
    DEFAULT_LANGUAGE,
    DEFAULT_TREND_COUNT,
    build_intelligence_prompt,
    build_notification_prompt,
    build_trends_prompt,
)
from market_sentinel.run_logger import RunLogger, RunRecord

logger = logging.getLogger(__name__)


class MarketIntelligenceService:
    """Fetch market events and trends, and draft alert notifications.

    Every extraction operation builds a prompt, dispatches it with one-shot
    model fallback and extracts typed events from the reply. Operations share
    no mutable state and can run concurrently.

    Args:
        dispatcher: Dispatcher wrapping the text generator.
        extractor: Extractor turning replies into events.
        primary_model: Model tried first for intelligence and trends.
        fallback_model: Model used once when the primary fails transiently.
        notification_model: Model used first for drafting notifications.
        tool_config: Options for intelligence and trend requests.
        language: Output language requested from the model.
        default_keywords: Topics used when no keywords are given.
        trend_count: Number of trends requested by ``fetch_trends``.
        run_logger: Optional RunLogger for per-operation JSON logs.
    """

    def __init__(
        self,
        dispatcher: FallbackDispatcher,
        extractor: MarketEventExtractor,
        *,
        primary_model: str = "claude-sonnet-4-5-20250929",
        fallback_model: str = "claude-haiku-4-5-20251001",
        notification_model: str = "claude-haiku-4-5-20251001",
        tool_config: ToolConfig | None = None,
        language: str = DEFAULT_LANGUAGE,
        default_keywords: Sequence[str] = DEFAULT_KEYWORDS,
        trend_count: int = DEFAULT_TREND_COUNT,
        run_logger: RunLogger | None = None,
    ) -> None:
        self._dispatcher = dispatcher
        self._extractor = extractor
        self._primary_model = primary_model
        self._fallback_model = fallback_model
        self._notification_model = notification_model
        self._tool_config = tool_config or ToolConfig()
        self._language = language
        self._default_keywords = tuple(default_keywords)
        self._trend_count = trend_count
        self._run_logger = run_logger

    async def fetch_intelligence(self, keywords: Sequence[str]) -> list[MarketEvent]:
        """Fetch recent market-moving events about ``keywords``.

        Args:
            keywords: Focus topics; empty means the default topic set.

        Returns:
            Extracted events in the order the model listed them.

        Raises:
            UpstreamError: If generation failed on both models.
            ExtractionError: If the reply held no decodable JSON array.
        """
        prompt = build_intelligence_prompt(
            keywords,
            language=self._language,
            default_keywords=self._default_keywords,
        )
        return await self._fetch_events("fetch_intelligence", {"keywords": list(keywords)}, prompt)

    async def fetch_trends(self) -> list[MarketEvent]:
        """Fetch the top global market trends."""
        prompt = build_trends_prompt(count=self._trend_count, language=self._language)
        return await self._fetch_events("fetch_trends", {"count": self._trend_count}, prompt)

    async def fetch_dashboard(
        self, keywords: Sequence[str]
    ) -> tuple[list[MarketEvent], list[MarketEvent]]:
        """Fetch intelligence and trends concurrently.

        If either pipeline fails, the other is cancelled and the first
        failure is raised as-is.

        Returns:
            Tuple of (intelligence events, trend events).
        """
        try:
            async with asyncio.TaskGroup() as group:
                events = group.create_task(self.fetch_intelligence(keywords))
                trends = group.create_task(self.fetch_trends())
        except ExceptionGroup as eg:
            raise eg.exceptions[0]
        return (events.result(), trends.result())

    async def draft_notification(self, event: MarketEvent, recipient: str) -> str:
        """Draft an HTML alert email about ``event`` for ``recipient``.

        The generated text is returned verbatim; no extraction is applied.
        """
        prompt = build_notification_prompt(event, recipient, language=self._language)
        request = GenerationRequest(
            prompt_text=prompt,
            primary_model=self._notification_model,
            fallback_model=self._fallback_model,
            tool_config=dataclasses.replace(self._tool_config, web_search=False),
        )

        record = self._start("draft_notification", {"event_id": event.id, "recipient": recipient})
        try:
            result = await self._dispatch(record, request)
        except MarketSentinelError as e:
            self._finish(record, [], error=e)
            raise
        self._finish(record, [result.text])
        return result.text

    async def _fetch_events(
        self, operation: str, input_data: Any, prompt: str
    ) -> list[MarketEvent]:
        request = GenerationRequest(
            prompt_text=prompt,
            primary_model=self._primary_model,
            fallback_model=self._fallback_model,
            tool_config=self._tool_config,
        )

        record = self._start(operation, input_data)
        try:
            result = await self._dispatch(record, request)

            t0 = time.monotonic()
            events = self._extractor.extract(result.text, result.citations)
            duration = time.monotonic() - t0
        except MarketSentinelError as e:
            self._finish(record, [], error=e)
            raise

        if self._run_logger:
            self._run_logger.log_stage(
                record,
                stage="extraction",
                component="MarketEventExtractor",
                input_data={"text_length": len(result.text), "citations": result.citations},
                output_data=events,
                usage=None,
                duration_seconds=duration,
            )
        logger.info("%s extracted %d events using %s", operation, len(events), result.model)
        self._finish(record, events)
        return events

    async def _dispatch(
        self, record: RunRecord | None, request: GenerationRequest
    ) -> GenerationResult:
        t0 = time.monotonic()
        result = await self._dispatcher.dispatch(request)
        duration = time.monotonic() - t0

        if self._run_logger:
            self._run_logger.log_stage(
                record,
                stage="dispatch",
                component="FallbackDispatcher",
                input_data={
                    "primary_model": request.primary_model,
                    "fallback_model": request.fallback_model,
                    "tool_config": request.tool_config,
                },
                output_data={
                    "model": result.model,
                    "dispatch_path": result.dispatch_path,
                    "text_length": len(result.text),
                    "citation_count": len(result.citations),
                },
                usage=result.usage,
                duration_seconds=duration,
            )
        return result

    def _start(self, operation: str, input_data: Any) -> RunRecord | None:
        if self._run_logger is None:
            return None
        return self._run_logger.start_run(operation, input_data)

    def _finish(
        self,
        record: RunRecord | None,
        records: list[Any],
        *,
        error: BaseException | None = None,
    ) -> None:
        if self._run_logger is None:
            return
        self._run_logger.finish_run(record, records, error=error)
