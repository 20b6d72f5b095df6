"""Line-granularity translation that keeps structural prefixes verbatim."""

import logging
from typing import Awaitable, Callable, List, Optional, Sequence

from ..analysis.syntax import front_matter_end
from ..exceptions import TranslationCountMismatchError
from ..interfaces.patterns import LineClassifier, LineScanState
from ..models.document import LineItem
from .line_patterns import build_line_classifiers

logger = logging.getLogger(__name__)

BatchTranslator = Callable[[List[str]], Awaitable[List[str]]]


class LineProtector:
    """
    Decomposes a chunk into literal and translatable lines.

    Only the prose part of each translatable line is translated; heading,
    list, quote and container markers, indentation and all literal lines are
    re-emitted byte for byte.
    """

    def __init__(self, classifiers: Optional[Sequence[LineClassifier]] = None):
        self._classifiers = list(classifiers) if classifiers is not None else build_line_classifiers()

    def split(self, text: str, at_document_start: bool = False) -> List[LineItem]:
        """
        Classify every line of a chunk.

        Args:
            text: Chunk text.
            at_document_start: Whether the chunk opens the document, which
                enables front-matter detection.

        Returns:
            One LineItem per line; ``prefix + text`` joined with ``\\n``
            reproduces the input.
        """
        lines = text.split("\n")
        state = LineScanState(at_document_start=at_document_start)
        state.in_front_matter = at_document_start and front_matter_end(lines) is not None

        items: List[LineItem] = []
        for index, line in enumerate(lines):
            state.line_index = index
            for classifier in self._classifiers:
                item = classifier.classify(line, state)
                if item is not None:
                    items.append(item)
                    break
            else:
                raise ValueError(f"No line classifier claimed line {index}: {line!r}")
        return items

    async def protect(
        self,
        text: str,
        translate: BatchTranslator,
        at_document_start: bool = False
    ) -> str:
        """
        Translate a chunk line by line.

        All translatable texts are sent in one call, in line order. A chunk
        with nothing to translate is returned unchanged without a call.

        Args:
            text: Chunk text.
            translate: Coroutine function translating a list of strings.
            at_document_start: Whether the chunk opens the document.

        Returns:
            The rebuilt chunk text.

        Raises:
            TranslationCountMismatchError: If the translator returns a
                different number of strings than it was given.
        """
        items = self.split(text, at_document_start=at_document_start)
        payload = [item.text.rstrip("\r") for item in items if item.is_translatable]
        if not payload:
            return text

        logger.debug(f"Line-protected translation of {len(payload)}/{len(items)} lines")
        translations = await translate(payload)
        return self.rebuild(items, translations)

    @staticmethod
    def rebuild(items: Sequence[LineItem], translations: Sequence[str]) -> str:
        """Re-zip translations with their prefixes and the literal lines."""
        expected = sum(1 for item in items if item.is_translatable)
        if len(translations) != expected:
            raise TranslationCountMismatchError(expected=expected, actual=len(translations))

        remaining = iter(translations)
        lines = []
        for item in items:
            if not item.is_translatable:
                lines.append(item.render())
                continue
            # A line must stay a single line
            translated = " ".join(next(remaining).strip().splitlines())
            if item.text.endswith("\r"):
                translated += "\r"
            lines.append(item.render(translated))
        return "\n".join(lines)
