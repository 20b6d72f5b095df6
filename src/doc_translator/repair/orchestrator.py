"""Repair loop escalating translation strategies until structure is preserved.

The loop is an explicit state machine over ``RepairPhase``:

    TRANSLATED -> VERIFYING -> DONE
                            -> ESCALATE -> TRANSLATED ...

Full batch translation is retried while the attempt counter is below the
batch retry limit; after that every chunk is line-protected until the
attempt budget is spent, at which point the last translation is accepted
with warnings. The loop never fails the document.
"""

import logging
from typing import List, Optional, Sequence

from ..execution.retry import is_retryable_error
from ..models.document import Chunk
from ..models.enums import RepairPhase, RepairStrategy
from ..models.verification import RepairOutcome, RepairState
from ..translation.context import TranslationContext
from ..translation.dispatcher import ChunkTranslator
from ..verification.diagnostics import ChunkDiffReporter
from ..verification.verifier import EquivalenceVerifier

logger = logging.getLogger(__name__)

DEFAULT_BATCH_RETRY_LIMIT = 3
DEFAULT_MAX_ATTEMPTS = 10


class RepairOrchestrator:
    """
    Drives translation, verification and escalation for one document.
    """

    def __init__(
        self,
        translator: ChunkTranslator,
        verifier: Optional[EquivalenceVerifier] = None,
        batch_retry_limit: int = DEFAULT_BATCH_RETRY_LIMIT,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        debug: bool = False,
        reporter: Optional[ChunkDiffReporter] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            translator: Chunk translator bound to the translation capability.
            verifier: Structural verifier; a default instance if None.
            batch_retry_limit: Attempts below this number re-run full batch
                translation.
            max_attempts: Total attempt budget, the initial translation
                included.
            debug: Log chunk diffs at DEBUG level on every failed check.
            reporter: Diff renderer used in debug mode.
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if batch_retry_limit < 1 or batch_retry_limit > max_attempts:
            raise ValueError("batch_retry_limit must be between 1 and max_attempts")
        self._translator = translator
        self._verifier = verifier or EquivalenceVerifier()
        self.batch_retry_limit = batch_retry_limit
        self.max_attempts = max_attempts
        self.debug = debug
        self._reporter = reporter or ChunkDiffReporter()

    def next_strategy(self, attempt: int) -> Optional[RepairStrategy]:
        """
        Strategy for the attempt following a failed ``attempt``.

        Returns:
            FULL_BATCH below the batch retry limit, LINE_PROTECTED below the
            attempt budget, None once the budget is spent.
        """
        if attempt < self.batch_retry_limit:
            return RepairStrategy.FULL_BATCH
        if attempt < self.max_attempts:
            return RepairStrategy.LINE_PROTECTED
        return None

    async def run(
        self,
        chunks: Sequence[Chunk],
        context: TranslationContext
    ) -> RepairOutcome:
        """
        Translate chunks and repair structural damage.

        Every attempt starts from the original chunks; a rejected translation
        is never fed back.

        Args:
            chunks: Original chunks from segmentation.
            context: Per-document translation context.

        Returns:
            RepairOutcome with the accepted chunks and any warnings.
        """
        original = list(chunks)
        state = RepairState(attempt=1, strategy=RepairStrategy.FULL_BATCH, chunks=list(original))
        warnings: List[str] = []
        history: List[RepairStrategy] = []
        forced = False
        aborted = False

        while state.phase is not RepairPhase.DONE:
            if state.phase is RepairPhase.TRANSLATED:
                history.append(state.strategy)
                error = await self._translate(state, original, context, warnings)
                if error is None:
                    state.phase = RepairPhase.VERIFYING
                else:
                    # Errors that retrying cannot fix end the loop early
                    aborted = not is_retryable_error(error)
                    state.phase = RepairPhase.ESCALATE

            elif state.phase is RepairPhase.VERIFYING:
                state.verification = self._verifier.verify(original, state.chunks)
                if state.verification.is_valid:
                    logger.info(
                        f"Structure verified on attempt {state.attempt} "
                        f"({state.strategy.value})"
                    )
                    state.phase = RepairPhase.DONE
                else:
                    logger.info(
                        f"Attempt {state.attempt} ({state.strategy.value}) left "
                        f"{len(state.verification.mismatches)} structural mismatch(es)"
                    )
                    if self.debug:
                        logger.debug(self._reporter.render_report(
                            original, state.chunks, state.verification.mismatches,
                            title=f"Structure check, attempt {state.attempt}",
                        ))
                    state.phase = RepairPhase.ESCALATE

            elif state.phase is RepairPhase.ESCALATE:
                strategy = None if aborted else self.next_strategy(state.attempt)
                if strategy is None:
                    forced = state.translated
                    warnings.extend(self._give_up(state))
                    state.phase = RepairPhase.DONE
                else:
                    state.attempt += 1
                    state.strategy = strategy
                    logger.info(f"Escalating to attempt {state.attempt} ({strategy.value})")
                    state.phase = RepairPhase.TRANSLATED

        return RepairOutcome(
            chunks=state.chunks,
            attempts=state.attempt,
            strategy=state.strategy,
            verification=state.verification,
            forced=forced,
            translated=state.translated,
            warnings=warnings,
            strategy_history=history,
        )

    async def _translate(
        self,
        state: RepairState,
        original: List[Chunk],
        context: TranslationContext,
        warnings: List[str],
    ) -> Optional[Exception]:
        """Run one attempt; on failure keep the previous best translation."""
        try:
            state.chunks = await self._translator.translate(original, context, state.strategy)
        except Exception as e:
            message = (
                f"Attempt {state.attempt} ({state.strategy.value}) failed: "
                f"{type(e).__name__}: {e}"
            )
            logger.warning(message)
            warnings.append(message)
            return e
        state.translated = True
        return None

    def _give_up(self, state: RepairState) -> List[str]:
        if not state.translated:
            message = f"Translation failed after {state.attempt} attempt(s); original text kept"
            logger.warning(message)
            return [message]

        mismatches = state.verification.mismatches if state.verification else ()
        header = (
            f"Structure could not be restored after {state.attempt} attempt(s); "
            f"accepting last translation with {len(mismatches)} outstanding mismatch(es)"
        )
        logger.warning(header)
        return [header] + [m.describe() for m in mismatches]
