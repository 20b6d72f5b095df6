"""Abstract interfaces for the document translator."""

from .translator import ITranslationService
from .patterns import LineClassifier, LineScanState, SpanMatcher

__all__ = [
    "ITranslationService",
    "LineClassifier",
    "LineScanState",
    "SpanMatcher",
]
