"""Structural equivalence verification of translated chunks.

This module compares the structural fingerprints of original and translated
chunks pairwise and reports every discrepancy as a Mismatch.
"""

import logging
from typing import List, Optional, Sequence

from ..analysis.fingerprint import FingerprintExtractor
from ..models.document import Chunk
from ..models.enums import MismatchCategory
from ..models.fingerprint import StructuralFingerprint
from ..models.verification import Mismatch, VerificationResult

logger = logging.getLogger(__name__)


class EquivalenceVerifier:
    """
    Checks that translation preserved the structure of every chunk.

    Counts are compared first for each category; attributes are compared
    position by position only where the counts agree.
    """

    def __init__(self, extractor: Optional[FingerprintExtractor] = None):
        """
        Initialize the verifier.

        Args:
            extractor: Fingerprint extractor; a default instance if None.
        """
        self._extractor = extractor or FingerprintExtractor()

    def verify(
        self,
        original: Sequence[Chunk],
        translated: Sequence[Chunk]
    ) -> VerificationResult:
        """
        Verify a translated chunk list against the original.

        Args:
            original: Chunks as produced by segmentation.
            translated: Translated chunks, parallel to ``original``.

        Returns:
            VerificationResult, valid iff no mismatch was found. A length
            difference yields a single CHUNK_COUNT mismatch and no
            per-chunk comparison.
        """
        if len(original) != len(translated):
            mismatch = Mismatch(
                chunk_index=None,
                category=MismatchCategory.CHUNK_COUNT,
                detail=(
                    f"chunk count differs (expected {len(original)}, "
                    f"actual {len(translated)})"
                ),
            )
            logger.info(mismatch.describe())
            return VerificationResult.from_mismatches([mismatch])

        mismatches: List[Mismatch] = []
        for index, (source, target) in enumerate(zip(original, translated)):
            mismatches.extend(self.compare(
                index,
                self._extractor.extract(source.text),
                self._extractor.extract(target.text),
            ))

        for mismatch in mismatches:
            logger.info(mismatch.describe())
        return VerificationResult.from_mismatches(mismatches)

    def compare(
        self,
        index: int,
        expected: StructuralFingerprint,
        actual: StructuralFingerprint
    ) -> List[Mismatch]:
        """Compare two fingerprints of the chunk at ``index``."""
        found: List[Mismatch] = []

        def report(category: MismatchCategory, detail: str) -> None:
            found.append(Mismatch(chunk_index=index, category=category, detail=detail))

        def count_differs(category: MismatchCategory, label: str, left, right) -> bool:
            if len(left) == len(right):
                return False
            report(category, f"{label} count differs (expected {len(left)}, actual {len(right)})")
            return True

        if not count_differs(MismatchCategory.HEADERS, "headers", expected.headers, actual.headers):
            for pos, (a, b) in enumerate(zip(expected.headers, actual.headers), start=1):
                if a.level != b.level:
                    report(MismatchCategory.HEADERS,
                           f"header {pos} level differs (expected {a.level}, actual {b.level})")

        if not count_differs(MismatchCategory.LISTS, "list items", expected.lists, actual.lists):
            for pos, (a, b) in enumerate(zip(expected.lists, actual.lists), start=1):
                if a.list_type != b.list_type:
                    report(MismatchCategory.LISTS,
                           f"list item {pos} type differs "
                           f"(expected {a.list_type.value}, actual {b.list_type.value})")
                if a.level != b.level:
                    report(MismatchCategory.LISTS,
                           f"list item {pos} level differs (expected {a.level}, actual {b.level})")

        if not count_differs(MismatchCategory.CODE, "code", expected.code, actual.code):
            for pos, (a, b) in enumerate(zip(expected.code, actual.code), start=1):
                if a.language != b.language:
                    report(MismatchCategory.CODE,
                           f"code {pos} language differs "
                           f"(expected {a.language!r}, actual {b.language!r})")
                if a.kind != b.kind:
                    report(MismatchCategory.CODE,
                           f"code {pos} kind differs (expected {a.kind.value}, actual {b.kind.value})")
                if a.unterminated != b.unterminated:
                    report(MismatchCategory.CODE,
                           f"code {pos} termination differs "
                           f"(expected unterminated={a.unterminated}, "
                           f"actual unterminated={b.unterminated})")

        if not count_differs(MismatchCategory.LINKS, "links", expected.links, actual.links):
            for pos, (a, b) in enumerate(zip(expected.links, actual.links), start=1):
                if a.url and b.url and a.url != b.url:
                    report(MismatchCategory.LINKS,
                           f"link {pos} url differs (expected {a.url!r}, actual {b.url!r})")
                if a.link_type != b.link_type:
                    report(MismatchCategory.LINKS,
                           f"link {pos} type differs "
                           f"(expected {a.link_type.value}, actual {b.link_type.value})")
                if a.ref and b.ref and a.ref != b.ref:
                    report(MismatchCategory.LINKS,
                           f"link {pos} reference differs (expected {a.ref!r}, actual {b.ref!r})")

        if not count_differs(MismatchCategory.SPECIAL, "special tokens", expected.special, actual.special):
            for pos, (a, b) in enumerate(zip(expected.special, actual.special), start=1):
                if a.token_type != b.token_type:
                    report(MismatchCategory.SPECIAL,
                           f"special token {pos} type differs "
                           f"(expected {a.token_type!r}, actual {b.token_type!r})")

        return found
