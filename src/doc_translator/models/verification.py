"""Verification and repair result models."""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from .document import Chunk
from .enums import MismatchCategory, RepairPhase, RepairStrategy


@dataclass(frozen=True)
class Mismatch:
    """
    A single structural discrepancy between an original chunk and its
    translation.

    ``chunk_index`` is ``None`` for document-level problems such as a chunk
    count mismatch.
    """
    chunk_index: Optional[int]
    category: MismatchCategory
    detail: str

    def describe(self) -> str:
        if self.chunk_index is None:
            return f"[{self.category.value}] {self.detail}"
        return f"Chunk {self.chunk_index + 1} [{self.category.value}] {self.detail}"


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of one verification pass. Superseded, never mutated."""
    is_valid: bool
    mismatches: Tuple[Mismatch, ...] = field(default_factory=tuple)

    @classmethod
    def from_mismatches(cls, mismatches: List[Mismatch]) -> "VerificationResult":
        return cls(is_valid=not mismatches, mismatches=tuple(mismatches))

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary for logging/serialization."""
        return {
            "is_valid": self.is_valid,
            "mismatches": [
                {
                    "chunk_index": m.chunk_index,
                    "category": m.category.value,
                    "detail": m.detail,
                }
                for m in self.mismatches
            ],
        }


@dataclass
class RepairState:
    """
    Mutable state owned by one document's repair loop.

    ``chunks`` holds the most recent translation produced by the loop, or the
    original chunks when no attempt has produced a translation yet.
    """
    attempt: int
    strategy: RepairStrategy
    chunks: List[Chunk]
    phase: RepairPhase = RepairPhase.TRANSLATED
    translated: bool = False
    verification: Optional[VerificationResult] = None


@dataclass
class RepairOutcome:
    """
    Final result of a repair loop.

    ``forced`` is set when the attempt budget ran out and the last
    translation was accepted despite outstanding mismatches; ``translated``
    is False when no attempt produced a translation at all.
    """
    chunks: List[Chunk]
    attempts: int
    strategy: RepairStrategy
    verification: Optional[VerificationResult]
    forced: bool = False
    translated: bool = True
    warnings: List[str] = field(default_factory=list)
    strategy_history: List[RepairStrategy] = field(default_factory=list)
