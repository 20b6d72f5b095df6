"""Data models and enums for the document translation core."""

from .enums import (
    ChunkStrategy,
    CodeKind,
    LineKind,
    LinkType,
    ListType,
    MismatchCategory,
    RepairPhase,
    RepairStrategy,
    SpanKind,
)
from .document import Chunk, LineItem, ProtectedSpan, reassemble
from .fingerprint import (
    CodeEntry,
    HeaderEntry,
    LinkEntry,
    ListEntry,
    SpecialEntry,
    StructuralFingerprint,
)
from .verification import Mismatch, RepairOutcome, RepairState, VerificationResult

__all__ = [
    # Enums
    "ChunkStrategy",
    "CodeKind",
    "LineKind",
    "LinkType",
    "ListType",
    "MismatchCategory",
    "RepairPhase",
    "RepairStrategy",
    "SpanKind",
    # Document models
    "Chunk",
    "LineItem",
    "ProtectedSpan",
    "reassemble",
    # Fingerprint models
    "CodeEntry",
    "HeaderEntry",
    "LinkEntry",
    "ListEntry",
    "SpecialEntry",
    "StructuralFingerprint",
    # Verification / repair models
    "Mismatch",
    "RepairOutcome",
    "RepairState",
    "VerificationResult",
]
