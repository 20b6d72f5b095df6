"""Chunk analysis: structural fingerprints and strategy routing."""

from .classifier import ChunkClassifier
from .fingerprint import FingerprintExtractor, fingerprint, is_part_of_list, list_level

__all__ = [
    "ChunkClassifier",
    "FingerprintExtractor",
    "fingerprint",
    "is_part_of_list",
    "list_level",
]
