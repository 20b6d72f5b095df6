"""Translation dispatch, context and service adapters."""

from .context import TranslationContext
from .dispatcher import ChunkTranslator
from .service import FunctionTranslationService

__all__ = [
    "ChunkTranslator",
    "FunctionTranslationService",
    "TranslationContext",
]
