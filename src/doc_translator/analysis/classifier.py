"""Chunk routing by content shape."""

import logging
from typing import Dict, List, Sequence

from ..models.document import Chunk
from ..models.enums import ChunkStrategy
from .syntax import closes_fence, fence_kind, is_blank, is_front_matter_block, is_link_definition

logger = logging.getLogger(__name__)


class ChunkClassifier:
    """
    Routes each chunk to a translation strategy.

    - LITERAL: the chunk is exactly one fenced code block, or only
      link-reference definitions (blank lines allowed), or has no text.
    - LINE_PROTECTED: fence delimiters or link-reference definitions appear
      alongside other content.
    - BATCH: everything else; the whole text goes to a group call.
    """

    def classify(self, chunk: Chunk) -> ChunkStrategy:
        at_document_start = chunk.ordinal == 0 and not chunk.leading_separator
        return self.classify_text(chunk.text, at_document_start=at_document_start)

    def classify_text(self, text: str, at_document_start: bool = False) -> ChunkStrategy:
        if is_blank(text):
            return ChunkStrategy.LITERAL

        lines = text.split("\n")
        if at_document_start and is_front_matter_block(lines):
            return ChunkStrategy.LITERAL
        if self._is_single_fenced_block(lines):
            return ChunkStrategy.LITERAL

        content = [line for line in lines if not is_blank(line)]
        definitions = sum(1 for line in content if is_link_definition(line))
        if definitions == len(content):
            return ChunkStrategy.LITERAL

        if definitions or any(fence_kind(line) for line in lines):
            return ChunkStrategy.LINE_PROTECTED

        return ChunkStrategy.BATCH

    @staticmethod
    def _is_single_fenced_block(lines: List[str]) -> bool:
        if len(lines) < 2:
            return False
        opening = fence_kind(lines[0])
        if opening is None or not closes_fence(lines[-1], opening):
            return False
        return not any(closes_fence(line, opening) for line in lines[1:-1])

    def classify_all(self, chunks: Sequence[Chunk]) -> Dict[ChunkStrategy, List[Chunk]]:
        """Group chunks by strategy, preserving ordinal order within each group."""
        groups: Dict[ChunkStrategy, List[Chunk]] = {strategy: [] for strategy in ChunkStrategy}
        for chunk in chunks:
            groups[self.classify(chunk)].append(chunk)
        logger.debug(
            "Classified chunks: "
            + ", ".join(f"{k.value}={len(v)}" for k, v in groups.items())
        )
        return groups
