"""Retry/backoff engine.

Drives one logical call through as many attempts as its failures allow:

    PENDING -> ATTEMPTING -> SUCCEEDED
                          -> RETRYING -> ATTEMPTING ...
                          -> FAILED

A failure is retried only when it classifies as NETWORK, SERVER_FAULT or
RATE_LIMIT and fewer than ``max_retries`` retries have been made. The delay
before retry N is ``backoff_base ** N`` seconds (1s, 2s, 4s by default).
AUTHENTICATION, CLIENT_FAULT and UNKNOWN failures end the call at once and
the original exception propagates unchanged.

Example usage:
    engine = RetryEngine(credential_provider=lambda: store.get("api_key"))
    descriptor = RequestDescriptor(endpoint="/chat/completions", payload=request)
    response = await engine.execute(descriptor, send)
"""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

from codeassist.core.constants import BACKOFF_BASE_SECONDS, MAX_RETRIES
from codeassist.core.errors import ErrorClassification, classify_failure
from codeassist.core.logging import get_logger

_logger = get_logger("retry")

T = TypeVar("T")
P = TypeVar("P")

SleepFunc = Callable[[float], Awaitable[Any]]


class RequestState(str, Enum):
    """Lifecycle of a logical call inside the engine."""

    PENDING = "pending"
    ATTEMPTING = "attempting"
    RETRYING = "retrying"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class RequestDescriptor(Generic[P]):
    """One logical call.

    Attributes:
        endpoint: Path the call is addressed to.
        payload: Request body, passed unchanged to every attempt.
        id: Random token unique per logical call.
        attempt_count: Retries made so far (0 during the first attempt).
        state: Current lifecycle state.
    """

    endpoint: str
    payload: P
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    attempt_count: int = 0
    state: RequestState = RequestState.PENDING


SendFunc = Callable[[RequestDescriptor[P], str], Awaitable[T]]


@dataclass(frozen=True)
class RetryPolicy:
    """Retry limits and backoff curve.

    Attributes:
        max_retries: Retries allowed after the first attempt.
        backoff_base: Delay before retry N is ``backoff_base ** N`` seconds.
    """

    max_retries: int = MAX_RETRIES
    backoff_base: float = BACKOFF_BASE_SECONDS

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.backoff_base < 1:
            raise ValueError("backoff_base must be >= 1")

    def delay_for(self, attempt_count: int) -> float:
        """Delay before the retry that follows attempt ``attempt_count``."""
        return float(self.backoff_base**attempt_count)

    def should_retry(self, classification: ErrorClassification, attempt_count: int) -> bool:
        return classification.is_retriable and attempt_count < self.max_retries


class RetryEngine:
    """Executes descriptors with classification-driven exponential backoff.

    Bookkeeping for in-flight calls is held per instance and keyed by the
    descriptor id, so concurrent calls never share counters.
    """

    def __init__(
        self,
        credential_provider: Callable[[], str],
        policy: RetryPolicy | None = None,
        *,
        sleep: SleepFunc = asyncio.sleep,
        classifier: Callable[[object], ErrorClassification] = classify_failure,
    ) -> None:
        """Initialize the engine.

        Args:
            credential_provider: Returns the current credential. Called
                before every attempt so a rotated key is honored mid-sequence.
            policy: Retry limits; defaults to 3 retries with 1/2/4s backoff.
            sleep: Awaitable sleep used for backoff delays.
            classifier: Maps a failure to its classification.
        """
        self._credential_provider = credential_provider
        self.policy = policy or RetryPolicy()
        self._sleep = sleep
        self._classify = classifier
        self._in_flight: dict[str, RequestDescriptor[Any]] = {}

    def is_tracking(self, request_id: str) -> bool:
        """Whether retry bookkeeping exists for ``request_id``."""
        return request_id in self._in_flight

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    async def execute(self, descriptor: RequestDescriptor[P], send: SendFunc[P, T]) -> T:
        """Run ``send`` until it succeeds or the failure becomes terminal.

        Args:
            descriptor: The logical call. ``attempt_count`` and ``state`` are
                updated in place.
            send: Performs exactly one attempt given the descriptor and the
                current credential.

        Returns:
            Whatever the successful attempt returned.

        Raises:
            Exception: The failure of the last attempt, unchanged.
        """
        self._in_flight[descriptor.id] = descriptor
        try:
            while True:
                descriptor.state = RequestState.ATTEMPTING
                api_key = self._credential_provider()
                try:
                    result = await send(descriptor, api_key)
                except Exception as exc:
                    classification = self._classify(exc)
                    if not self.policy.should_retry(classification, descriptor.attempt_count):
                        descriptor.state = RequestState.FAILED
                        _logger.error(
                            "request_failed",
                            request_id=descriptor.id,
                            endpoint=descriptor.endpoint,
                            attempts=descriptor.attempt_count + 1,
                            classification=classification.value,
                            error_message=str(exc),
                        )
                        raise

                    delay = self.policy.delay_for(descriptor.attempt_count)
                    descriptor.state = RequestState.RETRYING
                    _logger.warning(
                        "request_retrying",
                        request_id=descriptor.id,
                        endpoint=descriptor.endpoint,
                        retry=descriptor.attempt_count + 1,
                        delay_seconds=delay,
                        classification=classification.value,
                    )
                    await self._sleep(delay)
                    descriptor.attempt_count += 1
                    continue

                descriptor.state = RequestState.SUCCEEDED
                if descriptor.attempt_count:
                    _logger.info(
                        "request_recovered",
                        request_id=descriptor.id,
                        attempts=descriptor.attempt_count + 1,
                    )
                return result
        finally:
            self._in_flight.pop(descriptor.id, None)


__all__ = [
    "RequestDescriptor",
    "RequestState",
    "RetryEngine",
    "RetryPolicy",
]
