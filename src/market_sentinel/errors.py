"""Exceptions raised by the generation and extraction pipeline."""

from market_sentinel.data import DispatchState


class MarketSentinelError(Exception):
    """Base class for pipeline failures surfaced to callers."""


class UpstreamError(MarketSentinelError):
    """The text generator failed and the one-shot fallback did not recover it.

    Args:
        model: Identifier of the model whose call failed last.
        status: Numeric status/code carried by the underlying failure, if any.
        message: Underlying failure message.
        dispatch_path: States visited by the dispatcher before giving up.
    """

    def __init__(
        self,
        model: str,
        status: int | None,
        message: str,
        dispatch_path: tuple[DispatchState, ...] = (),
    ) -> None:
        self.model = model
        self.status = status
        self.message = message
        self.dispatch_path = dispatch_path
        status_text = f" (status {status})" if status is not None else ""
        super().__init__(f"Generation with {model} failed{status_text}: {message}")


class ExtractionError(MarketSentinelError):
    """No decodable JSON array could be recovered from generated text.

    Args:
        reason: Short description of what went wrong.
        raw: The full generated text.
        candidate: The best-guess payload that was tried, if any.
    """

    def __init__(self, reason: str, raw: str, candidate: str | None = None) -> None:
        self.reason = reason
        self.raw = raw
        self.candidate = candidate
        super().__init__(reason)
