"""core/retry.py — Per-operation retry policy for upstream calls.

Only the operations named in RetryPolicy.operations are retried; everything
else runs exactly once. The default set ({"get_user", "delete_user"}) keeps
non-idempotent calls (create, update, nested POSTs) out of the retry path.
Override it with RETRY_OPERATIONS in the environment.

Backoff is linear: after attempt n fails, wait base_delay_seconds * n before
attempt n + 1 (1s, 2s with the defaults). The wait is an awaited sleep, so it
suspends only the calling request.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Iterable, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryError,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_incrementing,
)

from core.errors import DeserializationError, RetryExhaustedError, UpstreamError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]

DEFAULT_RETRY_OPERATIONS = frozenset({"get_user", "delete_user"})

# ValidationError is deliberately absent: a bad payload stays bad.
RETRYABLE_ERRORS = (UpstreamError, DeserializationError)


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    base_delay_seconds: float = 1.0
    operations: frozenset[str] = field(default_factory=lambda: DEFAULT_RETRY_OPERATIONS)

    @classmethod
    def from_settings(cls, settings) -> "RetryPolicy":
        return cls(
            max_attempts=settings.retry_max_attempts,
            base_delay_seconds=settings.retry_base_delay_seconds,
            operations=frozenset(settings.retry_operations),
        )

    def applies_to(self, operation: str) -> bool:
        return operation in self.operations

    def with_operations(self, operations: Iterable[str]) -> "RetryPolicy":
        return RetryPolicy(self.max_attempts, self.base_delay_seconds, frozenset(operations))


async def call_with_retry(
    operation: str,
    fn: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    sleep: Sleep,
) -> T:
    """Run ``fn`` under ``policy``.

    Args:
        operation: Operation name, matched against policy.operations and
                   used in log lines and the RetryExhaustedError message.
        fn:        Zero-argument coroutine factory; called once per attempt.
        policy:    Attempt budget, base delay and covered operations.
        sleep:     Awaitable sleep used between attempts (asyncio.sleep in
                   production, a recorder in tests).

    Raises:
        RetryExhaustedError: the operation is covered and every attempt failed
            with a retryable error. Chained from the last failure.
        GoRestError: uncovered operations and non-retryable errors propagate
            unchanged.
    """
    if not policy.applies_to(operation) or policy.max_attempts <= 1:
        return await fn()

    retrying = AsyncRetrying(
        stop=stop_after_attempt(policy.max_attempts),
        wait=wait_incrementing(
            start=policy.base_delay_seconds,
            increment=policy.base_delay_seconds,
        ),
        retry=retry_if_exception_type(RETRYABLE_ERRORS),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        sleep=sleep,
    )

    try:
        async for attempt in retrying:
            with attempt:
                return await fn()
    except RetryError as exc:
        last_error = exc.last_attempt.exception()
        logger.error(
            "retries exhausted",
            extra={
                "operation": operation,
                "attempts": policy.max_attempts,
                "error": str(last_error),
            },
        )
        raise RetryExhaustedError(operation, policy.max_attempts, last_error) from last_error
