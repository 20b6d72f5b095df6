"""Document-related data models for the translation core."""

from dataclasses import dataclass, replace
from typing import List, Optional, Sequence

from .enums import LineKind, SpanKind


@dataclass(frozen=True)
class Chunk:
    """
    A translation unit: a contiguous slice of the document plus the
    separators needed to rebuild it.

    Concatenating the first chunk's ``leading_separator`` followed by every
    chunk's ``text + trailing_separator`` in ordinal order reproduces the
    source document exactly.
    """
    ordinal: int
    text: str
    trailing_separator: str = ""
    leading_separator: str = ""  # only ever set on the first chunk

    def with_text(self, text: str) -> "Chunk":
        """Return a copy carrying new text and the same separators."""
        return replace(self, text=text)

    @property
    def byte_size(self) -> int:
        return len(self.text.encode("utf-8"))


@dataclass(frozen=True)
class ProtectedSpan:
    """
    Offset range of a structural region that must stay inside one chunk.

    Spans start at the beginning of a line and end at the end of a line,
    excluding that line's terminating newline.
    """
    start: int
    end: int
    text: str
    kind: SpanKind


@dataclass(frozen=True)
class LineItem:
    """
    One line of a chunk as seen by the line protector.

    For translatable items only ``text`` goes to translation; ``prefix``
    (heading marker, list marker, quote marker, indentation) is re-attached
    verbatim afterwards.
    """
    kind: LineKind
    prefix: str
    text: str

    @property
    def is_translatable(self) -> bool:
        return self.kind is LineKind.TRANSLATABLE

    def render(self, text: Optional[str] = None) -> str:
        """Rebuild the line, optionally substituting translated text."""
        if text is None or not self.is_translatable:
            return self.prefix + self.text
        return self.prefix + text


def reassemble(chunks: Sequence[Chunk]) -> str:
    """
    Rebuild a document from its chunks.

    This is the exact inverse of segmentation when chunk texts are
    unmodified; translated chunks are stitched back with their original
    separators.
    """
    ordered: List[Chunk] = sorted(chunks, key=lambda c: c.ordinal)
    if not ordered:
        return ""
    parts = [ordered[0].leading_separator]
    for chunk in ordered:
        parts.append(chunk.text)
        parts.append(chunk.trailing_separator)
    return "".join(parts)
