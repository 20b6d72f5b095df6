"""Pattern interfaces used by segmentation and line protection."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ..models.document import LineItem, ProtectedSpan


class SpanMatcher(ABC):
    """
    Recognizer for one class of syntactically atomic span.

    Matchers are independent of each other; the segmenter runs them in order
    and resolves overlaps.
    """

    @abstractmethod
    def match(self, text: str, start: int) -> Optional[ProtectedSpan]:
        """
        Find the first span of this kind at or after ``start``.

        Args:
            text: Document text with normalized line endings.
            start: Offset to search from.

        Returns:
            The span found, or None when there is no further match.
        """
        pass


@dataclass
class LineScanState:
    """Scan state carried from line to line by the line protector."""
    line_index: int = 0
    in_fence: bool = False
    fence_marker: Optional[str] = None
    in_front_matter: bool = False
    at_document_start: bool = False


class LineClassifier(ABC):
    """
    Classifier for one kind of line.

    Classifiers are consulted in priority order; the first one returning a
    LineItem wins. Classifiers may update the scan state.
    """

    @abstractmethod
    def classify(self, line: str, state: LineScanState) -> Optional[LineItem]:
        """
        Classify a single line.

        Args:
            line: Line text without its newline.
            state: Mutable scan state shared by all classifiers.

        Returns:
            A LineItem when this classifier claims the line, otherwise None.
        """
        pass
