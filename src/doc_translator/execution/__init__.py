"""Concurrency and retry primitives."""

from .executor import DEFAULT_CONCURRENCY, BoundedExecutor
from .retry import call_with_retry, create_retry_decorator, is_retryable_error

__all__ = [
    "DEFAULT_CONCURRENCY",
    "BoundedExecutor",
    "call_with_retry",
    "create_retry_decorator",
    "is_retryable_error",
]
