"""Diff reports of original versus translated chunks for debugging."""

import difflib
from enum import Enum
from typing import List, Optional, Sequence

from ..models.document import Chunk
from ..models.verification import Mismatch


class DiffType(Enum):
    """Types of differences."""
    INSERT = "insert"
    DELETE = "delete"
    EQUAL = "equal"


class DiffSegment:
    """A segment of text with diff information."""

    def __init__(self, text: str, diff_type: DiffType):
        self.text = text
        self.diff_type = diff_type

    def __repr__(self) -> str:
        return f"DiffSegment({self.diff_type.value}, {self.text!r})"


class ChunkDiffReporter:
    """
    Renders side-by-side comparisons of chunk lists.

    Used when verification fails and debugging is enabled, so the structural
    damage a translation introduced can be located by eye.
    """

    def __init__(self, preview_length: int = 100):
        """
        Initialize the reporter.

        Args:
            preview_length: Characters shown per chunk in count summaries.
        """
        self.preview_length = preview_length

    def compute_segments(self, original: str, translated: str) -> List[DiffSegment]:
        """
        Compute line-level diff segments between two texts.

        Args:
            original: Original chunk text.
            translated: Translated chunk text.

        Returns:
            Ordered segments; a replacement appears as a delete then an insert.
        """
        before = original.split("\n")
        after = translated.split("\n")
        matcher = difflib.SequenceMatcher(None, before, after, autojunk=False)
        segments: List[DiffSegment] = []

        for tag, i1, i2, j1, j2 in matcher.get_opcodes():
            if tag == "equal":
                segments.append(DiffSegment("\n".join(before[i1:i2]), DiffType.EQUAL))
                continue
            if tag in ("delete", "replace"):
                segments.append(DiffSegment("\n".join(before[i1:i2]), DiffType.DELETE))
            if tag in ("insert", "replace"):
                segments.append(DiffSegment("\n".join(after[j1:j2]), DiffType.INSERT))

        return segments

    def unified_diff(self, original: Chunk, translated: Chunk) -> str:
        """Unified line diff of one chunk pair."""
        label = f"chunk {original.ordinal + 1}"
        return "\n".join(difflib.unified_diff(
            original.text.split("\n"),
            translated.text.split("\n"),
            fromfile=f"{label} (original)",
            tofile=f"{label} (translated)",
            lineterm="",
        ))

    def _preview(self, text: str) -> str:
        flat = text.replace("\n", "\\n")
        if len(flat) > self.preview_length:
            return flat[: self.preview_length] + "..."
        return flat

    def render_count_mismatch(
        self,
        original: Sequence[Chunk],
        translated: Sequence[Chunk],
        title: str = "Chunk count mismatch"
    ) -> str:
        """Summarize both chunk lists when their lengths differ."""
        lines = [
            f"=== {title} ===",
            f"Original chunks: {len(original)}",
            f"Translated chunks: {len(translated)}",
            "",
            "Original:",
        ]
        lines.extend(f"  {i + 1}. {self._preview(c.text)}" for i, c in enumerate(original))
        lines.append("")
        lines.append("Translated:")
        lines.extend(f"  {i + 1}. {self._preview(c.text)}" for i, c in enumerate(translated))
        lines.append(f"=== end of {title.lower()} ===")
        return "\n".join(lines)

    def render_report(
        self,
        original: Sequence[Chunk],
        translated: Sequence[Chunk],
        mismatches: Optional[Sequence[Mismatch]] = None,
        title: str = "Structure check"
    ) -> str:
        """
        Render mismatches followed by a diff of every chunk that failed.

        Args:
            original: Original chunks.
            translated: Translated chunks.
            mismatches: Mismatches to list; every chunk pair is diffed if None.
            title: Report heading.

        Returns:
            Multi-line plain-text report.
        """
        if len(original) != len(translated):
            return self.render_count_mismatch(original, translated)

        mismatches = list(mismatches or [])
        lines = [f"=== {title} ===", f"{len(mismatches)} structural issue(s):"]
        lines.extend(f"  {i + 1}. {m.describe()}" for i, m in enumerate(mismatches))

        if mismatches:
            failing = sorted({m.chunk_index for m in mismatches if m.chunk_index is not None})
        else:
            failing = list(range(len(original)))
        for index in failing:
            diff = self.unified_diff(original[index], translated[index])
            lines.append("")
            lines.append(diff if diff else f"chunk {index + 1}: no textual difference")

        lines.append(f"=== end of {title.lower()} ===")
        return "\n".join(lines)
