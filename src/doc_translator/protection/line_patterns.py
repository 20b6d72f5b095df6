"""Line classifiers used by the line protector.

Each classifier recognizes one kind of line. They are consulted in a fixed
priority order and the first one that claims a line decides whether it is
kept literally or which prefix is preserved in front of the translated text.
"""

import re
from typing import List, Optional, Pattern

from ..analysis.syntax import (
    FRONT_MATTER_DELIMITER,
    closes_fence,
    fence_kind,
    is_blank,
    is_link_definition,
)
from ..interfaces.patterns import LineClassifier, LineScanState
from ..models.document import LineItem
from ..models.enums import LineKind

_LIST_MARKER = r"(?:[-*+]|\d{1,9}[.)])"


def literal(line: str) -> LineItem:
    return LineItem(kind=LineKind.LITERAL, prefix="", text=line)


def translatable(prefix: str, text: str) -> LineItem:
    # Nothing left to translate once the prefix is removed
    if is_blank(text):
        return LineItem(kind=LineKind.LITERAL, prefix=prefix, text=text)
    return LineItem(kind=LineKind.TRANSLATABLE, prefix=prefix, text=text)


class FrontMatterLine(LineClassifier):
    """Leading YAML front matter, delimiters included, is never translated."""

    def classify(self, line: str, state: LineScanState) -> Optional[LineItem]:
        if state.in_front_matter:
            if state.line_index > 0 and FRONT_MATTER_DELIMITER.match(line):
                state.in_front_matter = False
            return literal(line)
        return None


class FenceDelimiterLine(LineClassifier):
    """Opening and closing fences; toggles the inside-fence flag."""

    def classify(self, line: str, state: LineScanState) -> Optional[LineItem]:
        kind = fence_kind(line)
        if kind is None:
            return None
        if not state.in_fence:
            state.in_fence = True
            state.fence_marker = kind
        elif closes_fence(line, state.fence_marker):
            state.in_fence = False
            state.fence_marker = None
        return literal(line)


class InsideFenceLine(LineClassifier):
    def classify(self, line: str, state: LineScanState) -> Optional[LineItem]:
        return literal(line) if state.in_fence else None


class PrefixedLine(LineClassifier):
    """
    Line whose structural prefix is matched by a regex.

    The pattern must define two groups: the prefix kept verbatim and the
    text sent to translation.
    """

    def __init__(self, name: str, pattern: str):
        self.name = name
        self._regex: Pattern[str] = re.compile(pattern)

    def classify(self, line: str, state: LineScanState) -> Optional[LineItem]:
        match = self._regex.match(line)
        if match is None:
            return None
        return translatable(match.group(1), match.group(2))

    def __repr__(self) -> str:
        return f"PrefixedLine({self.name})"


class BlankLine(LineClassifier):
    def classify(self, line: str, state: LineScanState) -> Optional[LineItem]:
        return literal(line) if is_blank(line) else None


class LinkDefinitionLine(LineClassifier):
    def classify(self, line: str, state: LineScanState) -> Optional[LineItem]:
        return literal(line) if is_link_definition(line) else None


class NoWordsLine(LineClassifier):
    """Lines without any word character (rules, table delimiters) stay as-is."""

    _WORD = re.compile(r"\w")

    def classify(self, line: str, state: LineScanState) -> Optional[LineItem]:
        return None if self._WORD.search(line) else literal(line)


class DefaultLine(LineClassifier):
    """Whole line is translated; only leading indentation is preserved."""

    _INDENT = re.compile(r"^([ \t]*)(.*)$", re.DOTALL)

    def classify(self, line: str, state: LineScanState) -> Optional[LineItem]:
        match = self._INDENT.match(line)
        return translatable(match.group(1), match.group(2))


def build_line_classifiers() -> List[LineClassifier]:
    """Build the line classifiers in priority order."""
    return [
        FrontMatterLine(),
        FenceDelimiterLine(),
        InsideFenceLine(),
        PrefixedLine("heading", r"^([ \t]{0,3}#{1,6}[ \t]+)(.*)$"),
        PrefixedLine(
            "list_item",
            rf"^([ \t]*{_LIST_MARKER}[ \t]+(?:\[[ xX]\][ \t]+)?)(.*)$",
        ),
        PrefixedLine("callout", r"^([ \t]*>[ \t]*\[![A-Za-z]+\][-+]?[ \t]*)(.*)$"),
        PrefixedLine(
            "blockquote",
            rf"^([ \t]*(?:>[ \t]?)+(?:{_LIST_MARKER}[ \t]+|#{{1,6}}[ \t]+)?)(.*)$",
        ),
        PrefixedLine("container", r"^([ \t]*(?::{3,}|!{3})[ \t]*\w*[ \t]*)(.*)$"),
        BlankLine(),
        LinkDefinitionLine(),
        NoWordsLine(),
        DefaultLine(),
    ]
