"""Protected span patterns for segmentation.

Each pattern recognizes one class of Markdown construct that must never be
split across chunks. Patterns run on text whose line endings have been
normalized to ``\\n``; every span starts at a line start and ends at a line
end (the terminating newline is not part of the span).

Most constructs are matched by a single regular expression. HTML elements
and display math may contain fenced code; ``DelimitedBlockMatcher`` looks for
their terminator line by line and never inside a fenced code block.
"""

import re
import sys
from bisect import bisect_right
from dataclasses import dataclass
from typing import List, Optional, Pattern, Tuple

from ..interfaces.patterns import SpanMatcher
from ..models.document import ProtectedSpan
from ..models.enums import SpanKind

_LIST_MARKER = r"(?:[-*+]|\d{1,9}[.)])"

_BLOCK_HTML_TAGS = (
    "address|article|aside|audio|blockquote|center|details|dialog|div|dl|"
    "fieldset|figure|footer|form|header|iframe|nav|ol|p|picture|pre|script|"
    "section|style|summary|svg|table|ul|video"
)

# Closed by any delimiter of the opening kind, info string or not
_FENCED_CODE = (
    r"^[ \t]*(?P<fence>```|~~~)[^\n]*\n"
    r"(?:.*?\n)??"
    r"[ \t]*(?P=fence)[^\n]*$"
)
_FENCED_CODE_REGEX = re.compile(_FENCED_CODE, re.MULTILINE | re.DOTALL)

Region = Tuple[int, int]


def find_fenced_regions(text: str) -> List[Region]:
    """Offsets of every terminated fenced code block, left to right."""
    return [found.span() for found in _FENCED_CODE_REGEX.finditer(text)]


def region_at(regions: List[Region], offset: int) -> Optional[Region]:
    """Return the region containing ``offset``, if any."""
    index = bisect_right(regions, (offset, sys.maxsize)) - 1
    if index >= 0 and regions[index][0] <= offset < regions[index][1]:
        return regions[index]
    return None


@dataclass
class SpanPattern:
    """Pattern definition for one protected span kind."""
    kind: SpanKind
    pattern: str
    flags: int = re.MULTILINE
    description: str = ""


@dataclass
class BlockPattern:
    """
    Pattern definition for a block closed by a terminator found line by line.

    ``closer`` and ``nested_opener`` may contain ``{tag}``, replaced by the
    escaped ``tag`` group of the opening match. Each nested opening must be
    closed before the block itself can close.
    """
    kind: SpanKind
    opener: str
    closer: str
    nested_opener: Optional[str] = None
    flags: int = re.MULTILINE
    description: str = ""


class RegexSpanMatcher(SpanMatcher):
    """SpanMatcher backed by a single compiled regular expression."""

    def __init__(self, span_pattern: SpanPattern):
        self.kind = span_pattern.kind
        self.description = span_pattern.description
        self._regex: Pattern[str] = re.compile(span_pattern.pattern, span_pattern.flags)

    def match(self, text: str, start: int) -> Optional[ProtectedSpan]:
        found = self._regex.search(text, start)
        if found is None:
            return None
        return ProtectedSpan(
            start=found.start(),
            end=found.end(),
            text=found.group(0),
            kind=self.kind,
        )

    def __repr__(self) -> str:
        return f"RegexSpanMatcher({self.kind.value})"


class DelimitedBlockMatcher(SpanMatcher):
    """
    SpanMatcher for blocks that may enclose fenced code.

    Openings inside a fenced code block are ignored, and lines inside fenced
    code never close a block, so a closing tag or ``$$`` quoted in a code
    sample stays part of the sample.
    """

    def __init__(self, block_pattern: BlockPattern):
        self.kind = block_pattern.kind
        self.description = block_pattern.description
        self._pattern = block_pattern
        self._opener: Pattern[str] = re.compile(block_pattern.opener, block_pattern.flags)
        self._regions_text: Optional[str] = None
        self._regions: List[Region] = []

    def match(self, text: str, start: int) -> Optional[ProtectedSpan]:
        regions = self._fenced_regions(text)
        position = start
        while True:
            opening = self._opener.search(text, position)
            if opening is None:
                return None
            region = region_at(regions, opening.start())
            if region is not None:
                position = region[1]
                continue
            end = self._find_end(text, opening, regions)
            if end is not None:
                return ProtectedSpan(
                    start=opening.start(),
                    end=end,
                    text=text[opening.start():end],
                    kind=self.kind,
                )
            position = opening.end()

    def _fenced_regions(self, text: str) -> List[Region]:
        # The segmenter calls match repeatedly on the same text
        if text is not self._regions_text:
            self._regions_text = text
            self._regions = find_fenced_regions(text)
        return self._regions

    def _tokens(self, opening: re.Match) -> Pattern[str]:
        tag = re.escape(opening.groupdict().get("tag") or "")
        alternatives = [f"(?P<close>{self._pattern.closer.replace('{tag}', tag)})"]
        if self._pattern.nested_opener:
            alternatives.append(f"(?P<open>{self._pattern.nested_opener.replace('{tag}', tag)})")
        return re.compile("|".join(alternatives), self._pattern.flags)

    def _find_end(self, text: str, opening: re.Match, regions: List[Region]) -> Optional[int]:
        """End offset of the line closing the block, or None if it never closes."""
        tokens = self._tokens(opening)
        depth = 1
        position = opening.end()
        while position <= len(text):
            region = region_at(regions, position)
            if region is not None:
                position = region[1] + 1
                continue
            line_end = text.find("\n", position)
            if line_end == -1:
                line_end = len(text)
            for token in tokens.finditer(text, position, line_end):
                depth += 1 if token.group("close") is None else -1
                if depth == 0:
                    return line_end
            position = line_end + 1
        return None

    def __repr__(self) -> str:
        return f"DelimitedBlockMatcher({self.kind.value})"


def build_span_patterns() -> List[SpanPattern]:
    """Build the ordered list of single-regex span patterns."""
    return [
        SpanPattern(
            kind=SpanKind.FRONT_MATTER,
            pattern=r"\A---[ \t]*\n(?:.*?\n)??---[ \t]*$",
            flags=re.MULTILINE | re.DOTALL,
            description="YAML front matter at the very start of the document",
        ),
        SpanPattern(
            kind=SpanKind.FENCED_CODE,
            pattern=_FENCED_CODE,
            flags=re.MULTILINE | re.DOTALL,
            description="fenced code block closed by the same fence kind",
        ),
        SpanPattern(
            kind=SpanKind.BLOCK_QUOTE,
            pattern=r"^[ \t]{0,3}>[^\n]*(?:\n[ \t]{0,3}>[^\n]*)*",
            description="consecutive quoted lines",
        ),
        SpanPattern(
            kind=SpanKind.LIST_BLOCK,
            pattern=(
                rf"^[ \t]*{_LIST_MARKER}[ \t]+[^\n]*"
                rf"(?:\n(?:[ \t]*\n)*(?:[ \t]*{_LIST_MARKER}[ \t]+|[ \t]+\S)[^\n]*)*"
            ),
            description="list items with their indented continuation lines",
        ),
        SpanPattern(
            kind=SpanKind.TABLE,
            pattern=(
                # header row, delimiter row, body rows
                r"^[^\n]*\|[^\n]*\n"
                r"(?=[^\n]*\|)[ \t]*\|?[ \t]*:?-+:?[ \t]*"
                r"(?:\|[ \t]*:?-+:?[ \t]*)*\|?[ \t]*$"
                r"(?:\n[^\n]*\|[^\n]*)*"
                # or consecutive pipe-led rows
                r"|^[ \t]*\|[^\n]*(?:\n[ \t]*\|[^\n]*)*"
            ),
            description="pipe table",
        ),
        SpanPattern(
            kind=SpanKind.MATH_BLOCK,
            pattern=r"^[ \t]*\$\$[^\n]*?\$\$[ \t]*$",
            description="display math on a single line",
        ),
    ]


def build_block_patterns() -> List[BlockPattern]:
    """Build the ordered list of delimited block patterns."""
    return [
        BlockPattern(
            kind=SpanKind.HTML_BLOCK,
            opener=rf"^[ \t]*<(?P<tag>{_BLOCK_HTML_TAGS})\b[^>]*>",
            closer=r"</{tag}\s*>",
            nested_opener=r"<{tag}\b[^>]*(?<!/)>",
            flags=re.MULTILINE | re.IGNORECASE,
            description="block-level HTML element, nested elements of the same tag included",
        ),
        BlockPattern(
            kind=SpanKind.MATH_BLOCK,
            opener=r"^[ \t]*\$\$[ \t]*$",
            closer=r"^[ \t]*\$\$[ \t]*$",
            description="display math delimited by $$ lines",
        ),
    ]


def build_default_matchers() -> List[SpanMatcher]:
    """Instantiate a matcher for every default pattern."""
    matchers: List[SpanMatcher] = [RegexSpanMatcher(p) for p in build_span_patterns()]
    matchers.extend(DelimitedBlockMatcher(p) for p in build_block_patterns())
    return matchers
