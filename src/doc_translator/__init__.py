"""
Document Translator

Structure-preserving translation of Markdown documents: split without
breaking syntax, translate through an external capability, verify that the
structure survived and repair it when it did not.
"""

__version__ = "0.1.0"

# Export main components
from .analysis import ChunkClassifier, FingerprintExtractor, fingerprint
from .config import (
    ConfigurationError,
    ConfigurationManager,
    SystemConfiguration,
    TerminologyMapping,
    TranslationPolicy,
    ValidationResult,
)
from .exceptions import (
    TranslationCountMismatchError,
    TranslationError,
    TranslationServiceError,
)
from .execution import BoundedExecutor, call_with_retry
from .interfaces import ITranslationService
from .models import (
    Chunk,
    ChunkStrategy,
    LineItem,
    Mismatch,
    RepairStrategy,
    StructuralFingerprint,
    VerificationResult,
    reassemble,
)
from .pipeline import (
    PipelineConfig,
    PipelineResult,
    PipelineStats,
    TranslationPipeline,
    translate_document,
)
from .protection import LineProtector
from .repair import RepairOrchestrator
from .segmentation import Segmenter, segment
from .translation import ChunkTranslator, FunctionTranslationService, TranslationContext
from .verification import ChunkDiffReporter, EquivalenceVerifier

__all__ = [
    "ChunkClassifier",
    "FingerprintExtractor",
    "fingerprint",
    "ConfigurationError",
    "ConfigurationManager",
    "SystemConfiguration",
    "TerminologyMapping",
    "TranslationPolicy",
    "ValidationResult",
    "TranslationCountMismatchError",
    "TranslationError",
    "TranslationServiceError",
    "BoundedExecutor",
    "call_with_retry",
    "ITranslationService",
    "Chunk",
    "ChunkStrategy",
    "LineItem",
    "Mismatch",
    "RepairStrategy",
    "StructuralFingerprint",
    "VerificationResult",
    "reassemble",
    "PipelineConfig",
    "PipelineResult",
    "PipelineStats",
    "TranslationPipeline",
    "translate_document",
    "LineProtector",
    "RepairOrchestrator",
    "Segmenter",
    "segment",
    "ChunkTranslator",
    "FunctionTranslationService",
    "TranslationContext",
    "ChunkDiffReporter",
    "EquivalenceVerifier",
]
