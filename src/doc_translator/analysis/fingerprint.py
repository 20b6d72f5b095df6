"""Structural fingerprint extraction.

This module computes a comparable structural signature of a Markdown text
span: headings, list items, code constructs, links and special tokens. Two
spans whose fingerprints agree are considered structurally equivalent.
"""

import re
from typing import List, Optional

from ..models.enums import CodeKind, LinkType, ListType
from ..models.fingerprint import (
    CodeEntry,
    HeaderEntry,
    LinkEntry,
    ListEntry,
    SpecialEntry,
    StructuralFingerprint,
)
from .syntax import FENCE_DELIMITER

_HEADER = re.compile(r"^(#{1,6})\s+")
_UNORDERED_ITEM = re.compile(r"^[-*+]\s+")
_ORDERED_ITEM = re.compile(r"^\d+[.)]\s+")
_LIST_ITEM = re.compile(r"^(?:[-*+]|\d+[.)])\s")
_LEADING_SPACE = re.compile(r"^\s*")

_INLINE_CODE = re.compile(r"`[^`\n]+`")

_INLINE_LINK = re.compile(r"\[([^\]]*)\]\(([^)]+)\)")
_REFERENCE_LINK = re.compile(r"\[([^\]]*)\]\[([^\]]*)\]")
_LINK_DEFINITION = re.compile(r"^\s*\[([^\]]+)\]:\s*(\S+)", re.MULTILINE)
_AUTOLINK = re.compile(r"<(https?://[^>]+)>")

_CONTAINER = re.compile(r"^:::\s*(\w+)")
_ADMONITION = re.compile(r"^!!!\s*(\w+)")
_CALLOUT = re.compile(r"^>\s*\[!(\w+)\]")
_INLINE_MATH = re.compile(r"\$[^$\n]+\$")
_HTML_COMMENT = re.compile(r"<!--.*?-->")


def list_level(indent: int) -> int:
    """
    Nesting level from indentation width.

    Indents under four columns count in steps of two, wider ones in steps
    of four, so both common nesting styles map to the same levels.
    """
    if indent == 0:
        return 1
    return indent // (4 if indent >= 4 else 2) + 1


def is_part_of_list(lines: List[str], index: int) -> bool:
    """
    Check whether a line is a list item or an indented continuation of one.

    Walks backwards over blank and indented lines looking for the nearest
    list item; an unindented non-list line ends the search.
    """
    line = lines[index]
    stripped = line.strip()
    if _LIST_ITEM.match(stripped):
        return True
    if not stripped or not line[:1].isspace():
        return False

    current_indent = len(_LEADING_SPACE.match(line).group(0))
    for previous in reversed(lines[:index]):
        previous_stripped = previous.strip()
        if not previous_stripped:
            continue
        if _LIST_ITEM.match(previous_stripped):
            return True
        previous_indent = len(_LEADING_SPACE.match(previous).group(0))
        if previous_indent < current_indent and previous_indent == 0:
            break
    return False


class FingerprintExtractor:
    """
    Extracts structural fingerprints from Markdown text.

    Extraction is pure and deterministic: the same text always yields an
    equal fingerprint.
    """

    def extract(self, text: str) -> StructuralFingerprint:
        """
        Compute the structural fingerprint of a text span.

        Args:
            text: Markdown text (a chunk or any fragment).

        Returns:
            StructuralFingerprint with all five categories in document order.
        """
        lines = text.split("\n")
        return StructuralFingerprint(
            headers=tuple(self.extract_headers(lines)),
            lists=tuple(self.extract_lists(lines)),
            code=tuple(self.extract_code(lines)),
            links=tuple(self.extract_links(text)),
            special=tuple(self.extract_special(lines)),
        )

    def extract_headers(self, lines: List[str]) -> List[HeaderEntry]:
        headers = []
        for line in lines:
            match = _HEADER.match(line.strip())
            if match:
                headers.append(HeaderEntry(level=len(match.group(1))))
        return headers

    def extract_lists(self, lines: List[str]) -> List[ListEntry]:
        items = []
        for line in lines:
            stripped = line.strip()
            if _UNORDERED_ITEM.match(stripped):
                list_type = ListType.UNORDERED
            elif _ORDERED_ITEM.match(stripped):
                list_type = ListType.ORDERED
            else:
                continue
            indent = len(_LEADING_SPACE.match(line).group(0))
            items.append(ListEntry(list_type=list_type, level=list_level(indent)))
        return items

    def extract_code(self, lines: List[str]) -> List[CodeEntry]:
        """
        Collect inline spans, fenced blocks and indented blocks.

        Inline spans inside a fence are ignored. A fence is only closed by a
        delimiter of the same kind; one left open at the end of the text is
        reported with ``unterminated=True``.
        """
        entries: List[CodeEntry] = []
        open_fence: Optional[str] = None
        open_language = ""

        for i, line in enumerate(lines):
            if open_fence is None:
                for _ in _INLINE_CODE.finditer(line):
                    entries.append(CodeEntry(language="", kind=CodeKind.INLINE))

            fence = FENCE_DELIMITER.match(line.strip())
            if fence:
                if open_fence is None:
                    open_fence = fence.group(1)
                    open_language = fence.group(2).strip()
                elif fence.group(1) == open_fence:
                    entries.append(CodeEntry(language=open_language, kind=CodeKind.FENCED))
                    open_fence = None
                    open_language = ""
                continue

            if open_fence is not None:
                continue

            if line.startswith("    ") and line.strip():
                previous = lines[i - 1] if i > 0 else ""
                if (not previous.strip() or previous.startswith("    ")) and not is_part_of_list(lines, i):
                    entries.append(CodeEntry(language="", kind=CodeKind.INDENTED))

        if open_fence is not None:
            entries.append(
                CodeEntry(language=open_language, kind=CodeKind.FENCED, unterminated=True)
            )
        return entries

    def extract_links(self, text: str) -> List[LinkEntry]:
        """Collect links grouped by type: inline, reference, definition, autolink."""
        links: List[LinkEntry] = []
        for match in _INLINE_LINK.finditer(text):
            links.append(LinkEntry(link_type=LinkType.INLINE, url=match.group(2)))
        for match in _REFERENCE_LINK.finditer(text):
            # An empty reference ([text][]) refers to its own text
            ref = match.group(2) or match.group(1)
            links.append(LinkEntry(link_type=LinkType.REFERENCE, ref=ref))
        for match in _LINK_DEFINITION.finditer(text):
            links.append(
                LinkEntry(link_type=LinkType.DEFINITION, url=match.group(2), ref=match.group(1))
            )
        for match in _AUTOLINK.finditer(text):
            links.append(LinkEntry(link_type=LinkType.AUTOLINK, url=match.group(1)))
        return links

    def extract_special(self, lines: List[str]) -> List[SpecialEntry]:
        special: List[SpecialEntry] = []
        open_fence: Optional[str] = None

        for i, line in enumerate(lines):
            stripped = line.strip()

            fence = FENCE_DELIMITER.match(stripped)
            if fence:
                if open_fence is None:
                    open_fence = fence.group(1)
                elif fence.group(1) == open_fence:
                    open_fence = None

            container = _CONTAINER.match(stripped)
            if container:
                special.append(SpecialEntry(container.group(1), "container"))
                continue
            admonition = _ADMONITION.match(stripped)
            if admonition:
                special.append(SpecialEntry(admonition.group(1), "admonition"))
                continue
            callout = _CALLOUT.match(stripped)
            if callout:
                special.append(SpecialEntry(callout.group(1).lower(), "callout"))
                continue
            if i == 0 and stripped == "---":
                if any(later.strip() == "---" for later in lines[1:]):
                    special.append(SpecialEntry("yaml", "front-matter"))
                continue
            if stripped == "$$":
                special.append(SpecialEntry("math", "math-block"))
                continue

            for _ in _INLINE_MATH.finditer(stripped):
                special.append(SpecialEntry("math", "math-inline"))
            if _HTML_COMMENT.search(stripped):
                special.append(SpecialEntry("comment", "html-comment"))
            if open_fence is None and not fence and "|" in stripped:
                special.append(SpecialEntry("table", "table-row"))

        return special


_default_extractor = FingerprintExtractor()


def fingerprint(text: str) -> StructuralFingerprint:
    """Compute the structural fingerprint of ``text`` with the default extractor."""
    return _default_extractor.extract(text)
