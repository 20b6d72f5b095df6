"""Structural verification of translated chunks."""

from .diagnostics import ChunkDiffReporter, DiffSegment, DiffType
from .verifier import EquivalenceVerifier

__all__ = [
    "ChunkDiffReporter",
    "DiffSegment",
    "DiffType",
    "EquivalenceVerifier",
]
