"""Retry with linearly increasing backoff for calls to the translation capability.

Each failing call waits ``attempt * base_delay`` seconds before the next try.
Errors flagged ``retryable=False`` fail fast; everything else is retried
until the attempt budget is spent, then the last error is re-raised.
"""

import logging
from functools import partial
from typing import Any, Awaitable, Callable, Optional, TypeVar

from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_incrementing,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 10
DEFAULT_BASE_DELAY = 1.0


def is_retryable_error(exception: BaseException) -> bool:
    """
    Decide whether a failed call may be tried again.

    Only ordinary exceptions are retried (never cancellation), and only when
    they do not carry ``retryable=False``.
    """
    if not isinstance(exception, Exception):
        return False
    return getattr(exception, "retryable", True) is not False


def _log_retry(description: Optional[str], retry_state: RetryCallState) -> None:
    """Log each failed attempt before sleeping."""
    fn = getattr(retry_state, "fn", None)
    fn_name = description or getattr(fn, "__name__", "call")
    wait_time = (
        retry_state.next_action.sleep
        if getattr(retry_state, "next_action", None) is not None
        else 0
    )
    exc: Optional[BaseException] = None
    if retry_state.outcome is not None:
        exc = retry_state.outcome.exception()

    logger.warning(
        f"{fn_name} failed (attempt {retry_state.attempt_number}), "
        f"retrying in {float(wait_time):.1f}s: {type(exc).__name__ if exc else 'error'}: {exc}"
    )


def create_retry_decorator(
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    base_delay: float = DEFAULT_BASE_DELAY,
    description: Optional[str] = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Create a tenacity decorator with linear backoff.

    Works for both plain and coroutine functions.

    Args:
        max_attempts: Total number of tries, the first one included.
        base_delay: Delay unit in seconds; attempt n waits n * base_delay.
        description: Name used in retry log messages; defaults to the
            decorated function name.

    Returns:
        Decorator applying the retry policy.

    Raises:
        ValueError: If the parameters are out of range.
    """
    if max_attempts <= 0:
        raise ValueError("max_attempts must be > 0")
    if base_delay < 0:
        raise ValueError("base_delay must be >= 0")

    return retry(
        stop=stop_after_attempt(max_attempts),
        wait=wait_incrementing(start=base_delay, increment=base_delay),
        retry=retry_if_exception(is_retryable_error),
        before_sleep=partial(_log_retry, description),
        reraise=True,
    )


async def call_with_retry(
    func: Callable[[], Awaitable[T]],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    base_delay: float = DEFAULT_BASE_DELAY,
    description: Optional[str] = None,
) -> T:
    """Await ``func()`` under the retry policy and return its result."""

    @create_retry_decorator(max_attempts, base_delay, description)
    async def attempt() -> T:
        return await func()

    return await attempt()
