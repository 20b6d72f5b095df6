"""Dispatch of chunks to the translation capability by strategy.

Full batch translation routes every chunk through the classifier: literal
chunks are kept, batch chunks are grouped into calls of ``batch_size`` texts
and mixed chunks go through the line protector. Line-protected translation
sends every chunk through the line protector. Either way all calls of one
pass run on a single bounded executor, each wrapped in retry.
"""

import logging
from functools import partial
from typing import Dict, List, Optional, Sequence, Tuple

from ..analysis.classifier import ChunkClassifier
from ..config.models import TranslationPolicy
from ..exceptions import TranslationCountMismatchError
from ..execution.executor import BoundedExecutor
from ..execution.retry import call_with_retry
from ..interfaces.translator import ITranslationService
from ..models.document import Chunk
from ..models.enums import ChunkStrategy, RepairStrategy
from ..performance import timed_operation
from ..protection.line_protector import LineProtector
from .context import TranslationContext

logger = logging.getLogger(__name__)

TaskResult = List[Tuple[int, str]]


def _opens_document(chunk: Chunk) -> bool:
    return chunk.ordinal == 0 and not chunk.leading_separator


class ChunkTranslator:
    """
    Translates chunk lists with a given repair strategy.

    The returned list is parallel to the input: same length, same order,
    same separators, new texts.
    """

    def __init__(
        self,
        service: ITranslationService,
        policy: Optional[TranslationPolicy] = None,
        classifier: Optional[ChunkClassifier] = None,
        protector: Optional[LineProtector] = None,
    ):
        """
        Initialize the translator.

        Args:
            service: External translation capability.
            policy: Batch size, concurrency and retry settings.
            classifier: Chunk classifier; a default instance if None.
            protector: Line protector; a default instance if None.
        """
        self._service = service
        self.policy = policy or TranslationPolicy()
        self._classifier = classifier or ChunkClassifier()
        self._protector = protector or LineProtector()
        self._executor = BoundedExecutor(self.policy.concurrency)
        self.calls = 0

    @timed_operation("translation pass")
    async def translate(
        self,
        chunks: Sequence[Chunk],
        context: TranslationContext,
        strategy: RepairStrategy = RepairStrategy.FULL_BATCH
    ) -> List[Chunk]:
        """
        Translate chunks with the given strategy.

        Args:
            chunks: Original chunks.
            context: Per-document translation context.
            strategy: FULL_BATCH routes by classification; LINE_PROTECTED
                line-protects every chunk.

        Returns:
            Translated chunks, parallel to ``chunks``.

        Raises:
            TranslationError: If a call still fails after its retry budget.
        """
        if strategy is RepairStrategy.LINE_PROTECTED:
            factories = [
                partial(self._protect_chunk, chunk, context) for chunk in chunks
            ]
        else:
            factories = self._plan_full_batch(chunks, context)

        logger.debug(f"{strategy.value}: {len(chunks)} chunks in {len(factories)} tasks")
        results = await self._executor.run([partial(self._retrying, f) for f in factories])

        texts: Dict[int, str] = {}
        for task_result in results:
            texts.update(task_result)
        return [chunk.with_text(texts.get(chunk.ordinal, chunk.text)) for chunk in chunks]

    def _plan_full_batch(self, chunks: Sequence[Chunk], context: TranslationContext) -> list:
        groups = self._classifier.classify_all(chunks)
        factories = []

        batch = groups[ChunkStrategy.BATCH]
        size = self.policy.batch_size
        for start in range(0, len(batch), size):
            factories.append(partial(self._translate_group, batch[start:start + size], context))

        for chunk in groups[ChunkStrategy.LINE_PROTECTED]:
            factories.append(partial(self._protect_chunk, chunk, context))

        return factories

    async def _retrying(self, factory) -> TaskResult:
        return await call_with_retry(
            factory,
            max_attempts=self.policy.max_retry_attempts,
            base_delay=self.policy.retry_base_delay,
            description="translation call",
        )

    async def _translate_group(self, group: List[Chunk], context: TranslationContext) -> TaskResult:
        translated = await self.translate_texts([chunk.text for chunk in group], context)
        return [(chunk.ordinal, text) for chunk, text in zip(group, translated)]

    async def _protect_chunk(self, chunk: Chunk, context: TranslationContext) -> TaskResult:
        text = await self._protector.protect(
            chunk.text,
            partial(self.translate_texts, context=context),
            at_document_start=_opens_document(chunk),
        )
        return [(chunk.ordinal, text)]

    async def translate_texts(self, texts: List[str], context: TranslationContext) -> List[str]:
        """
        Make one call to the translation capability.

        Raises:
            TranslationCountMismatchError: If the result length differs from
                the input length.
        """
        self.calls += 1
        results = await self._service.translate_batch(list(texts), context.render(texts))
        if len(results) != len(texts):
            raise TranslationCountMismatchError(expected=len(texts), actual=len(results))
        return list(results)
