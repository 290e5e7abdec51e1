"""Tests for FallbackDispatcher and failure classification."""

import asyncio
import logging

import anthropic
import httpx
import pytest

from market_sentinel.data import (
    DispatchState,
    GenerationRequest,
    GenerationResult,
    SourceLink,
    ToolConfig,
)
from market_sentinel.dispatch.dispatcher import (
    FailureKind,
    FallbackDispatcher,
    TransientPolicy,
    classify_failure,
    failure_status,
)
from market_sentinel.errors import UpstreamError


class StatusError(Exception):
    """Upstream failure carrying a status attribute, like most SDK errors."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class ScriptedGenerator:
    """Generator that replays a fixed list of outcomes and records calls."""

    def __init__(self, outcomes: list[GenerationResult | BaseException]) -> None:
        self._outcomes = list(outcomes)
        self.calls: list[tuple[str, str, ToolConfig]] = []

    async def generate(self, model: str, prompt: str, config: ToolConfig) -> GenerationResult:
        self.calls.append((model, prompt, config))
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


def _api_status_error(status: int) -> anthropic.APIStatusError:
    request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    response = httpx.Response(status, request=request)
    if status >= 500:
        return anthropic.InternalServerError("upstream trouble", response=response, body=None)
    return anthropic.BadRequestError("bad prompt", response=response, body=None)


@pytest.fixture
def request_() -> GenerationRequest:
    return GenerationRequest(
        prompt_text="Find events",
        primary_model="primary-model",
        fallback_model="fallback-model",
        tool_config=ToolConfig(web_search=True, max_searches=2),
    )


@pytest.fixture
def fallback_result() -> GenerationResult:
    return GenerationResult(
        text='[{"title": "from fallback"}]',
        citations=(SourceLink(title="Reuters", uri="http://x"),),
        model="fallback-model",
    )


# -- classify_failure --


@pytest.mark.parametrize(
    "exc",
    [
        StatusError("boom", status=500),
        StatusError("boom", status=503),
        StatusError("An Internal error has occurred"),
        StatusError("500 Internal Server Error"),
    ],
)
def test_transient_failures(exc: Exception) -> None:
    assert classify_failure(exc, TransientPolicy()) is FailureKind.TRANSIENT


@pytest.mark.parametrize(
    "exc",
    [
        StatusError("bad request", status=400),
        StatusError("not found", status=404),
        StatusError("gateway", status=502),
        ValueError("prompt too long"),
    ],
)
def test_fatal_failures(exc: Exception) -> None:
    assert classify_failure(exc, TransientPolicy()) is FailureKind.FATAL


def test_status_read_from_code_attribute() -> None:
    exc = StatusError("boom")
    exc.code = 503  # type: ignore[attr-defined]
    assert failure_status(exc) == 503
    assert classify_failure(exc, TransientPolicy()) is FailureKind.TRANSIENT


def test_anthropic_status_errors_are_classified() -> None:
    assert classify_failure(_api_status_error(500), TransientPolicy()) is FailureKind.TRANSIENT
    assert classify_failure(_api_status_error(400), TransientPolicy()) is FailureKind.FATAL


def test_custom_policy() -> None:
    policy = TransientPolicy(status_codes=frozenset({529}), markers=("overloaded",))
    assert classify_failure(StatusError("x", status=529), policy) is FailureKind.TRANSIENT
    assert classify_failure(StatusError("Overloaded"), policy) is FailureKind.TRANSIENT
    assert classify_failure(StatusError("x", status=500), policy) is FailureKind.FATAL


# -- dispatch --


async def test_primary_success_makes_one_call(
    request_: GenerationRequest, fallback_result: GenerationResult
) -> None:
    primary = GenerationResult(text="ok", model="primary-model")
    generator = ScriptedGenerator([primary])
    result = await FallbackDispatcher(generator).dispatch(request_)

    assert result.text == "ok"
    assert len(generator.calls) == 1
    assert generator.calls[0] == ("primary-model", "Find events", request_.tool_config)
    assert result.dispatch_path == (DispatchState.PRIMARY_ATTEMPT, DispatchState.SUCCESS)


@pytest.mark.parametrize(
    "failure",
    [
        StatusError("unavailable", status=503),
        StatusError("boom", status=500),
        StatusError("Internal error encountered."),
    ],
)
async def test_transient_failure_falls_back_once(
    request_: GenerationRequest,
    fallback_result: GenerationResult,
    failure: Exception,
) -> None:
    generator = ScriptedGenerator([failure, fallback_result])
    result = await FallbackDispatcher(generator).dispatch(request_)

    assert len(generator.calls) == 2
    model, prompt, config = generator.calls[1]
    assert model == "fallback-model"
    assert prompt == request_.prompt_text
    assert config is request_.tool_config
    assert result.text == fallback_result.text
    assert result.citations == fallback_result.citations
    assert result.dispatch_path == (
        DispatchState.PRIMARY_ATTEMPT,
        DispatchState.TRANSIENT_FAILURE,
        DispatchState.FALLBACK_ATTEMPT,
        DispatchState.SUCCESS,
    )


async def test_fatal_failure_raises_without_fallback(request_: GenerationRequest) -> None:
    cause = StatusError("invalid prompt", status=400)
    generator = ScriptedGenerator([cause])

    with pytest.raises(UpstreamError) as exc_info:
        await FallbackDispatcher(generator).dispatch(request_)

    assert len(generator.calls) == 1
    err = exc_info.value
    assert err.model == "primary-model"
    assert err.status == 400
    assert err.message == "invalid prompt"
    assert err.__cause__ is cause
    assert err.dispatch_path == (DispatchState.PRIMARY_ATTEMPT, DispatchState.FATAL_FAILURE)


async def test_fallback_failure_is_final(request_: GenerationRequest) -> None:
    generator = ScriptedGenerator(
        [StatusError("down", status=503), StatusError("also down", status=503)]
    )

    with pytest.raises(UpstreamError) as exc_info:
        await FallbackDispatcher(generator).dispatch(request_)

    # No third attempt even though the fallback failure is also transient
    assert [c[0] for c in generator.calls] == ["primary-model", "fallback-model"]
    assert exc_info.value.model == "fallback-model"
    assert exc_info.value.status == 503
    assert exc_info.value.dispatch_path[-1] == DispatchState.FAILURE


async def test_fallback_is_logged(
    request_: GenerationRequest,
    fallback_result: GenerationResult,
    caplog: pytest.LogCaptureFixture,
) -> None:
    generator = ScriptedGenerator([StatusError("down", status=503), fallback_result])
    with caplog.at_level(logging.WARNING, logger="market_sentinel.dispatch.dispatcher"):
        await FallbackDispatcher(generator).dispatch(request_)

    assert "primary-model" in caplog.text
    assert "fallback-model" in caplog.text


async def test_fallback_matches_direct_fallback_call(
    request_: GenerationRequest, fallback_result: GenerationResult
) -> None:
    via_fallback = await FallbackDispatcher(
        ScriptedGenerator([StatusError("down", status=503), fallback_result])
    ).dispatch(request_)
    direct = await ScriptedGenerator([fallback_result]).generate(
        "fallback-model", request_.prompt_text, request_.tool_config
    )
    assert via_fallback.text == direct.text
    assert via_fallback.citations == direct.citations
    assert via_fallback.model == direct.model


async def test_cancellation_is_not_retried(request_: GenerationRequest) -> None:
    generator = ScriptedGenerator([asyncio.CancelledError()])
    with pytest.raises(asyncio.CancelledError):
        await FallbackDispatcher(generator).dispatch(request_)
    assert len(generator.calls) == 1


async def test_anthropic_internal_server_error_falls_back(
    request_: GenerationRequest, fallback_result: GenerationResult
) -> None:
    generator = ScriptedGenerator([_api_status_error(500), fallback_result])
    result = await FallbackDispatcher(generator).dispatch(request_)
    assert result.model == "fallback-model"
    assert len(generator.calls) == 2
