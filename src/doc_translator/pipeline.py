"""End-to-end document translation pipeline.

Wires segmentation, summarization, translation with structural repair and
reassembly together. The pipeline always returns a document: when nothing
could be translated the original text comes back unchanged, with the reason
in ``PipelineResult.warnings``.
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .config.config_manager import ConfigurationManager
from .config.models import ConfigurationError, TranslationPolicy
from .execution.retry import call_with_retry
from .interfaces.translator import ITranslationService
from .models.document import reassemble
from .models.enums import RepairStrategy
from .models.verification import RepairOutcome, VerificationResult
from .performance import DEFAULT_SLOW_STAGE_SECONDS, PerformanceMonitor
from .repair.orchestrator import RepairOrchestrator
from .segmentation.segmenter import Segmenter
from .translation.context import TranslationContext
from .translation.dispatcher import ChunkTranslator

logger = logging.getLogger(__name__)


@dataclass
class PipelineConfig:
    """Configuration for the translation pipeline."""

    # Explicit policy; takes precedence over one loaded from config_dir
    policy: Optional[TranslationPolicy] = None

    # Directory holding policy.json / terminology.json
    config_dir: Optional[Union[str, Path]] = None

    # Log chunk comparisons whenever structure verification fails
    debug: bool = False

    slow_stage_seconds: float = DEFAULT_SLOW_STAGE_SECONDS


@dataclass
class PipelineResult:
    """Result of translating one document."""

    document: str
    success: bool = False
    chunk_count: int = 0
    attempts: int = 0
    strategy: Optional[RepairStrategy] = None
    translated: bool = False
    forced: bool = False
    summary: str = ""
    verification: Optional[VerificationResult] = None
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    processing_time: float = 0.0
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def verified(self) -> bool:
        """Whether the returned document passed the structure check."""
        return self.verification is not None and self.verification.is_valid


@dataclass
class PipelineStats:
    """Statistics over all documents translated by one pipeline."""

    total_executions: int = 0
    successful_executions: int = 0
    failed_executions: int = 0
    forced_executions: int = 0
    average_processing_time: float = 0.0
    total_processing_time: float = 0.0


class TranslationPipeline:
    """
    Translates Markdown documents while preserving their structure.

    One pipeline instance can translate any number of documents; the
    translation context (summary, terminology) is built per document.
    """

    def __init__(
        self,
        service: ITranslationService,
        config: Optional[PipelineConfig] = None,
        config_manager: Optional[ConfigurationManager] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            service: External translation capability.
            config: Pipeline configuration; defaults if None.
            config_manager: Source of policy and terminology; created (and
                loaded from ``config.config_dir`` if set) when not provided.
        """
        self.config = config or PipelineConfig()
        self.stats = PipelineStats()
        self.performance_monitor = PerformanceMonitor(
            slow_stage_seconds=self.config.slow_stage_seconds
        )

        self._config_manager = config_manager or ConfigurationManager(
            config_dir=self.config.config_dir
        )
        if self.config.config_dir:
            try:
                result = self._config_manager.load_from_directory(self.config.config_dir)
                for error in result.errors:
                    logger.warning(f"Configuration error: {error}")
                logger.info(f"Loaded configuration from {self.config.config_dir}")
            except ConfigurationError as e:
                logger.warning(f"Failed to load configuration: {e}")

        self.policy = self.config.policy or self._config_manager.policy

        self._service = service
        self._segmenter = Segmenter(budget_bytes=self.policy.chunk_budget_bytes)
        self._translator = ChunkTranslator(service, self.policy)
        self._orchestrator = RepairOrchestrator(
            self._translator,
            batch_retry_limit=self.policy.batch_retry_limit,
            max_attempts=self.policy.max_attempts,
            debug=self.config.debug,
        )

        logger.info("Translation pipeline initialized")

    async def translate_document(self, document: str) -> PipelineResult:
        """
        Translate a document.

        Args:
            document: Markdown source text.

        Returns:
            PipelineResult holding the translated document (or the original
            when no translation was possible) and any warnings.
        """
        start_time = time.monotonic()
        result = PipelineResult(document=document)
        overall_metric = self.performance_monitor.start_operation(
            "pipeline_execution", document_bytes=len(document.encode("utf-8"))
        )

        try:
            with self.performance_monitor.track("segment"):
                chunks = self._segmenter.segment(document)
            result.chunk_count = len(chunks)
            logger.info(f"Document segmented into {len(chunks)} chunks")

            if chunks:
                if self.policy.summarize and document.strip():
                    with self.performance_monitor.track("summarize"):
                        result.summary = await self._summarize(document, result.warnings)

                context = TranslationContext.from_configuration(
                    self._config_manager.configuration, summary=result.summary
                )
                with self.performance_monitor.track("repair", chunks=len(chunks)):
                    outcome = await self._orchestrator.run(chunks, context)
                self._apply_outcome(result, outcome, document)

            result.success = True
            self.performance_monitor.end_operation(overall_metric, success=True)

        except Exception as e:
            error_msg = f"Pipeline execution failed: {e}"
            result.errors.append(error_msg)
            result.document = document
            logger.exception(error_msg)
            self.performance_monitor.end_operation(overall_metric, success=False, error=error_msg)

        finally:
            result.processing_time = time.monotonic() - start_time
            result.metadata["performance_stats"] = self.performance_monitor.get_all_stats()
            self._update_stats(result)

        logger.info(
            f"Document translated in {result.processing_time:.2f}s "
            f"({result.attempts} attempt(s), {len(result.warnings)} warning(s))"
        )
        return result

    async def _summarize(self, document: str, warnings: List[str]) -> str:
        """Summarize the document; failure yields an empty summary."""
        try:
            return await call_with_retry(
                lambda: self._service.summarize(document),
                max_attempts=self.policy.max_retry_attempts,
                base_delay=self.policy.retry_base_delay,
                description="summary",
            )
        except Exception as e:
            message = f"Summary unavailable, translating without it: {type(e).__name__}: {e}"
            logger.warning(message)
            warnings.append(message)
            return ""

    def _apply_outcome(self, result: PipelineResult, outcome: RepairOutcome, document: str) -> None:
        result.attempts = outcome.attempts
        result.strategy = outcome.strategy
        result.translated = outcome.translated
        result.forced = outcome.forced
        result.verification = outcome.verification
        result.warnings.extend(outcome.warnings)
        result.metadata["strategy_history"] = [s.value for s in outcome.strategy_history]
        result.metadata["translation_calls"] = self._translator.calls

        if outcome.translated:
            with self.performance_monitor.track("reassemble"):
                result.document = reassemble(outcome.chunks)
        else:
            result.document = document

    def _update_stats(self, result: PipelineResult) -> None:
        self.stats.total_executions += 1
        if result.success:
            self.stats.successful_executions += 1
        else:
            self.stats.failed_executions += 1
        if result.forced:
            self.stats.forced_executions += 1
        self.stats.total_processing_time += result.processing_time
        self.stats.average_processing_time = (
            self.stats.total_processing_time / self.stats.total_executions
        )

    def get_stats(self) -> PipelineStats:
        return self.stats

    def get_performance_stats(self) -> Dict[str, Dict[str, Any]]:
        return self.performance_monitor.get_all_stats()


async def translate_document(
    document: str,
    service: ITranslationService,
    budget_bytes: Optional[int] = None,
    policy: Optional[TranslationPolicy] = None,
) -> PipelineResult:
    """
    Translate one document with a throwaway pipeline.

    Args:
        document: Markdown source text.
        service: External translation capability.
        budget_bytes: Chunk byte budget; overrides the policy value.
        policy: Translation policy; defaults if None.

    Returns:
        PipelineResult for the document.
    """
    policy = policy or TranslationPolicy()
    if budget_bytes is not None:
        policy = TranslationPolicy(**{**policy.to_dict(), "chunk_budget_bytes": budget_bytes})
    pipeline = TranslationPipeline(service, PipelineConfig(policy=policy))
    return await pipeline.translate_document(document)
