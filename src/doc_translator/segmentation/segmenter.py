"""Markup-aware document segmentation.

Splits a document into translation chunks without breaking protected spans
(fenced code, quotes, lists, tables, HTML blocks, display math) and records
every separator so that reassembly reproduces the input byte for byte.
"""

import logging
import re
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence

from ..interfaces.patterns import SpanMatcher
from ..models.document import Chunk, ProtectedSpan
from .span_patterns import Region, build_default_matchers, find_fenced_regions, region_at

logger = logging.getLogger(__name__)

DEFAULT_BUDGET_BYTES = 2000

_LINE_ENDING = re.compile(r"\r\n?")
_BLANK_LINES = re.compile(r"(?:[ \t]*\n)*")
_PARAGRAPH_BREAK = re.compile(r"[ \t]*\n(?:[ \t]*\n)+")


def normalize_line_endings(text: str) -> str:
    """
    Map CRLF to `` \\n`` and lone CR to ``\\n``.

    The result has exactly the same length as the input, so offsets found in
    it are valid offsets into the original text.
    """
    return _LINE_ENDING.sub(lambda m: " \n" if len(m.group(0)) == 2 else "\n", text)


@dataclass
class _Unit:
    """Paragraph-equivalent unit prior to merging."""
    text: str
    separator: str = ""
    protected: bool = False


class _UnitBuilder:
    """Accumulates units and separators while walking the document."""

    def __init__(self, document: str, scan: str):
        self.document = document
        self.scan = scan
        self.leading = ""
        self.units: List[_Unit] = []

    def add_separator(self, start: int, end: int) -> None:
        if start >= end:
            return
        text = self.document[start:end]
        if self.units:
            self.units[-1].separator += text
        else:
            self.leading += text

    def add_span(self, span: ProtectedSpan) -> None:
        self.units.append(_Unit(self.document[span.start:span.end], protected=True))

    def add_gap(self, start: int, end: int) -> None:
        if start >= end:
            return

        lead = _BLANK_LINES.match(self.scan, start, end).end()
        self.add_separator(start, lead)

        content_end = end
        while content_end > lead and self.scan[content_end - 1] in " \t\n":
            content_end -= 1
        if content_end == lead:
            self.add_separator(lead, end)
            return

        position = lead
        for brk in _PARAGRAPH_BREAK.finditer(self.scan, lead, content_end):
            self.units.append(_Unit(self.document[position:brk.start()]))
            self.add_separator(brk.start(), brk.end())
            position = brk.end()
        self.units.append(_Unit(self.document[position:content_end]))
        self.add_separator(content_end, end)


class Segmenter:
    """
    Splits documents into ordered, budget-bounded chunks.

    Protected spans always form a chunk of their own, however large; prose
    paragraphs are merged greedily while the merged text stays within the
    byte budget.
    """

    def __init__(
        self,
        budget_bytes: int = DEFAULT_BUDGET_BYTES,
        matchers: Optional[Sequence[SpanMatcher]] = None
    ):
        """
        Initialize the segmenter.

        Args:
            budget_bytes: Maximum UTF-8 size of a merged prose chunk.
            matchers: Ordered span matchers; the default Markdown set if None.
        """
        if budget_bytes < 1:
            raise ValueError("budget_bytes must be positive")
        self.budget_bytes = budget_bytes
        self._matchers = list(matchers) if matchers is not None else build_default_matchers()

    def segment(self, document: str) -> List[Chunk]:
        """
        Split a document into chunks.

        Args:
            document: Raw document text.

        Returns:
            Chunks with ordinals 0..n-1. Empty for an empty document; a
            whitespace-only document yields one empty chunk whose leading
            separator holds the whole input.
        """
        if not document:
            return []

        scan = normalize_line_endings(document)
        builder = _UnitBuilder(document, scan)
        position = 0
        for span in self.find_protected_spans(scan):
            builder.add_gap(position, span.start)
            builder.add_span(span)
            position = span.end
        builder.add_gap(position, len(document))

        if not builder.units:
            return [Chunk(ordinal=0, text="", leading_separator=builder.leading)]

        merged = self._merge(builder.units)
        chunks = [
            Chunk(
                ordinal=i,
                text=unit.text,
                trailing_separator=unit.separator,
                leading_separator=builder.leading if i == 0 else "",
            )
            for i, unit in enumerate(merged)
        ]
        logger.debug(
            f"Segmented {len(document)} chars into {len(chunks)} chunks "
            f"({sum(1 for u in merged if u.protected)} protected)"
        )
        return chunks

    def find_protected_spans(self, scan: str) -> List[ProtectedSpan]:
        """
        Locate non-overlapping protected spans, left to right.

        At each step the earliest candidate wins, the longer one on equal
        starts, then the earlier matcher. Matchers whose candidate was
        overtaken search again from the end of the kept span. A span that
        ends inside fenced code is extended to the end of that code block.
        """
        regions = find_fenced_regions(scan)
        pending = [matcher.match(scan, 0) for matcher in self._matchers]
        spans: List[ProtectedSpan] = []
        while True:
            candidates = [span for span in pending if span is not None]
            if not candidates:
                break
            best = min(candidates, key=lambda span: (span.start, -span.end))
            best = self._trim(scan, self._cover_fence(scan, best, regions))
            spans.append(best)
            for i, matcher in enumerate(self._matchers):
                span = pending[i]
                if span is not None and span.start < best.end:
                    pending[i] = matcher.match(scan, best.end)
        return spans

    @staticmethod
    def _cover_fence(scan: str, span: ProtectedSpan, regions: List[Region]) -> ProtectedSpan:
        region = region_at(regions, span.end)
        if region is None or region[0] == span.end:
            return span
        return replace(span, end=region[1], text=scan[span.start:region[1]])

    @staticmethod
    def _trim(scan: str, span: ProtectedSpan) -> ProtectedSpan:
        # Trailing blanks (including a normalized CR) belong to the separator
        end = span.end
        while end > span.start + 1 and scan[end - 1] in " \t":
            end -= 1
        if end == span.end:
            return span
        return replace(span, end=end, text=span.text[: end - span.start])

    def _merge(self, units: List[_Unit]) -> List[_Unit]:
        merged: List[_Unit] = []
        for unit in units:
            previous = merged[-1] if merged else None
            if (
                previous is not None
                and not previous.protected
                and not unit.protected
                and self._fits(previous.text + previous.separator + unit.text)
            ):
                previous.text = previous.text + previous.separator + unit.text
                previous.separator = unit.separator
            else:
                merged.append(_Unit(unit.text, unit.separator, unit.protected))
        return merged

    def _fits(self, text: str) -> bool:
        return len(text.encode("utf-8")) <= self.budget_bytes


def segment(document: str, budget_bytes: int = DEFAULT_BUDGET_BYTES) -> List[Chunk]:
    """Split ``document`` into chunks of at most ``budget_bytes`` of merged prose."""
    return Segmenter(budget_bytes).segment(document)
