"""Custom exceptions for document translation."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class TranslationError(Exception):
    """
    Base exception for failures of the external translation capability.

    Attributes:
        message: Human-readable error description.
        details: Additional error details.
        retryable: Whether the retry layer may try the call again.
    """
    message: str
    details: Optional[dict] = field(default_factory=dict)
    retryable: bool = True

    def __post_init__(self):
        if self.details is None:
            self.details = {}
        super().__init__(str(self))

    def __str__(self) -> str:
        if not self.details:
            return self.message
        extra = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} | {extra}"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "retryable": self.retryable,
        }


@dataclass
class TranslationCountMismatchError(TranslationError):
    """
    Raised when the capability returns a different number of fragments
    than it was sent.

    Handled exactly like a transport error: retried, then surfaced.
    """
    message: str = "Translation result count does not match input count"
    expected: int = 0
    actual: int = 0

    def __post_init__(self):
        if self.details is None:
            self.details = {}
        self.details.setdefault("expected", self.expected)
        self.details.setdefault("actual", self.actual)
        super().__post_init__()


@dataclass
class TranslationServiceError(TranslationError):
    """
    Raised by service adapters for transport, quota or provider errors.

    Adapters set ``retryable=False`` for errors that cannot succeed on a
    second try (bad credentials, rejected content).
    """
    status_code: Optional[int] = None

    def __post_init__(self):
        if self.details is None:
            self.details = {}
        if self.status_code is not None:
            self.details.setdefault("status_code", self.status_code)
        super().__post_init__()
