"""Primary/fallback dispatch of generation requests."""

import dataclasses
import logging
from dataclasses import dataclass
from enum import StrEnum

from market_sentinel.data import DispatchState, GenerationRequest, GenerationResult
from market_sentinel.errors import UpstreamError
from market_sentinel.generate.base import TextGenerator

logger = logging.getLogger(__name__)


class FailureKind(StrEnum):
    """Classification of a failed generation call."""

    TRANSIENT = "transient"
    FATAL = "fatal"


@dataclass(frozen=True)
class TransientPolicy:
    """Which failures are worth one retry against the fallback model.

    Markers are matched case-insensitively against the failure message.
    """

    status_codes: frozenset[int] = frozenset({500, 503})
    markers: tuple[str, ...] = ("internal error", "internal server error")


def failure_status(exc: BaseException) -> int | None:
    """Return the numeric status/code carried by ``exc``, if any."""
    for attr in ("status_code", "status", "code"):
        value = getattr(exc, attr, None)
        # bool is an int subclass but never a status
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


def failure_message(exc: BaseException) -> str:
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(exc)


def classify_failure(exc: BaseException, policy: TransientPolicy) -> FailureKind:
    """Decide whether ``exc`` is a transient upstream fault or a fatal one."""
    status = failure_status(exc)
    if status is not None and status in policy.status_codes:
        return FailureKind.TRANSIENT
    message = failure_message(exc).lower()
    if any(marker.lower() in message for marker in policy.markers):
        return FailureKind.TRANSIENT
    return FailureKind.FATAL


class FallbackDispatcher:
    """Run a request on its primary model, falling back once on transient faults.

    The flow is a fixed two-attempt state machine rather than a retry loop:
    a transient failure of the primary attempt leads to exactly one fallback
    attempt whose outcome is final; any other failure is raised at once.

    Args:
        generator: Backend that performs the actual completion.
        policy: Transient-failure classification rules.
    """

    def __init__(
        self,
        generator: TextGenerator,
        *,
        policy: TransientPolicy | None = None,
    ) -> None:
        self._generator = generator
        self._policy = policy or TransientPolicy()

    @property
    def policy(self) -> TransientPolicy:
        return self._policy

    async def dispatch(self, request: GenerationRequest) -> GenerationResult:
        """Generate text for ``request``.

        Args:
            request: Prompt, model pair and tool options.

        Returns:
            The result of whichever attempt succeeded, with its dispatch path.

        Raises:
            UpstreamError: On a fatal primary failure, or when the fallback
                attempt fails.
        """
        path: list[DispatchState] = [DispatchState.PRIMARY_ATTEMPT]
        try:
            result = await self._generator.generate(
                request.primary_model, request.prompt_text, request.tool_config
            )
        except Exception as exc:
            kind = classify_failure(exc, self._policy)
            if kind is FailureKind.FATAL:
                path.append(DispatchState.FATAL_FAILURE)
                raise UpstreamError(
                    request.primary_model,
                    failure_status(exc),
                    failure_message(exc),
                    tuple(path),
                ) from exc
            path.append(DispatchState.TRANSIENT_FAILURE)
            logger.warning(
                "Primary model %s failed with a transient error (%s), "
                "retrying once with %s",
                request.primary_model,
                failure_message(exc),
                request.fallback_model,
            )
        else:
            path.append(DispatchState.SUCCESS)
            return dataclasses.replace(result, dispatch_path=tuple(path))

        path.append(DispatchState.FALLBACK_ATTEMPT)
        try:
            result = await self._generator.generate(
                request.fallback_model, request.prompt_text, request.tool_config
            )
        except Exception as exc:
            path.append(DispatchState.FAILURE)
            raise UpstreamError(
                request.fallback_model,
                failure_status(exc),
                failure_message(exc),
                tuple(path),
            ) from exc

        path.append(DispatchState.SUCCESS)
        return dataclasses.replace(result, dispatch_path=tuple(path))
