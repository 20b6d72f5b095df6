"""Integration tests for the end-to-end translation pipeline."""

import json
import logging
import tempfile
from pathlib import Path
from typing import List, Optional

import pytest

from doc_translator import (
    FunctionTranslationService,
    ITranslationService,
    PipelineConfig,
    RepairStrategy,
    TranslationError,
    TranslationPipeline,
    TranslationPolicy,
    translate_document,
)

pytestmark = pytest.mark.anyio

SCENARIO = "# Title\n\nHello world.\n\n- item one\n  continued\n- item two\n"


class FakeService(ITranslationService):
    """
    Upper-cases fragments.

    With ``break_batches`` set, multi-line fragments (whole chunks) lose
    their heading and list markers. With ``break_lines`` set, single lines
    sent by the line protector gain an inline code span.
    """

    def __init__(self, break_batches: bool = False, break_lines: bool = False):
        self.break_batches = break_batches
        self.break_lines = break_lines
        self.batches: List[List[str]] = []
        self.contexts: List[Optional[str]] = []
        self.summaries = 0

    async def translate_batch(self, texts, context=None):
        self.batches.append(list(texts))
        self.contexts.append(context)
        return [self._translate(t) for t in texts]

    def _translate(self, text):
        if "\n" in text and self.break_batches:
            text = text.replace("# ", "").replace("- ", "")
        elif "\n" not in text and self.break_lines:
            text += " `x`"
        return text.upper()

    async def summarize(self, text):
        self.summaries += 1
        return "A short test document."


def fast_policy(**overrides):
    values = {"retry_base_delay": 0.0}
    values.update(overrides)
    return TranslationPolicy(**values)


@pytest.fixture
def pipeline_factory():
    def build(service, **overrides):
        return TranslationPipeline(service, PipelineConfig(policy=fast_policy(**overrides)))
    return build


class TestScenario:

    async def test_heading_paragraph_and_list(self, pipeline_factory):
        service = FakeService()
        result = await pipeline_factory(service).translate_document(SCENARIO)

        assert result.success
        assert result.verified
        assert result.document == "# TITLE\n\nHELLO WORLD.\n\n- ITEM ONE\n  CONTINUED\n- ITEM TWO\n"
        assert result.chunk_count == 2
        assert result.attempts == 1
        assert result.strategy is RepairStrategy.FULL_BATCH
        assert result.warnings == []
        assert service.summaries == 1
        assert service.batches == [["# Title\n\nHello world.", "- item one\n  continued\n- item two"]]
        assert "A short test document." in service.contexts[0]

    async def test_crlf_document(self, pipeline_factory):
        result = await pipeline_factory(FakeService()).translate_document("Hello\r\n\r\nWorld\r\n")
        assert result.document == "HELLO\r\n\r\nWORLD\r\n"


class TestRepair:

    async def test_line_protection_restores_structure(self, pipeline_factory):
        service = FakeService(break_batches=True)
        result = await pipeline_factory(service).translate_document(SCENARIO)

        assert result.verified
        assert result.attempts == 4
        assert result.strategy is RepairStrategy.LINE_PROTECTED
        assert result.metadata["strategy_history"] == ["full_batch"] * 3 + ["line_protected"]
        assert result.document == "# TITLE\n\nHELLO WORLD.\n\n- ITEM ONE\n  CONTINUED\n- ITEM TWO\n"
        assert result.warnings == []

    async def test_unrepairable_structure_is_accepted_with_warnings(self, pipeline_factory):
        service = FakeService(break_batches=True, break_lines=True)
        pipeline = pipeline_factory(service, batch_retry_limit=2, max_attempts=4)

        result = await pipeline.translate_document(SCENARIO)

        assert result.success
        assert result.forced
        assert not result.verified
        assert result.attempts == 4
        assert result.warnings[0].startswith("Structure could not be restored after 4 attempt(s)")
        assert result.document.startswith("# TITLE `X`")
        assert pipeline.get_stats().forced_executions == 1

    async def test_non_retryable_failure_returns_original(self, pipeline_factory):
        async def reject(texts, context):
            raise TranslationError("invalid credentials", retryable=False)

        service = FunctionTranslationService(reject)
        result = await pipeline_factory(service).translate_document(SCENARIO)

        assert result.success
        assert not result.translated
        assert result.document == SCENARIO
        assert result.warnings[-1] == "Translation failed after 1 attempt(s); original text kept"


class TestSummary:

    async def test_missing_summary_degrades_to_warning(self, pipeline_factory):
        async def translate(texts, context):
            return [t.upper() for t in texts]

        result = await pipeline_factory(FunctionTranslationService(translate)).translate_document(SCENARIO)

        assert result.verified
        assert result.summary == ""
        assert result.warnings[0].startswith("Summary unavailable")

    async def test_summary_can_be_disabled(self, pipeline_factory):
        service = FakeService()
        await pipeline_factory(service, summarize=False).translate_document(SCENARIO)

        assert service.summaries == 0


class TestEdgeDocuments:

    async def test_empty_document(self, pipeline_factory):
        service = FakeService()
        result = await pipeline_factory(service).translate_document("")

        assert result.success
        assert result.document == ""
        assert result.chunk_count == 0
        assert service.batches == []
        assert service.summaries == 0

    async def test_whitespace_only_document(self, pipeline_factory):
        service = FakeService()
        result = await pipeline_factory(service).translate_document("\n\n   \n")

        assert result.document == "\n\n   \n"
        assert service.batches == []
        assert service.summaries == 0

    async def test_literal_only_document_is_unchanged(self, pipeline_factory):
        document = "```python\nprint('hi')\n```\n"
        service = FakeService()
        result = await pipeline_factory(service, summarize=False).translate_document(document)

        assert result.document == document
        assert service.batches == []

    async def test_unexpected_error_returns_original(self, pipeline_factory, monkeypatch):
        pipeline = pipeline_factory(FakeService())

        def explode(document):
            raise RuntimeError("segmenter crashed")

        monkeypatch.setattr(pipeline._segmenter, "segment", explode)
        result = await pipeline.translate_document(SCENARIO)

        assert not result.success
        assert result.document == SCENARIO
        assert result.errors == ["Pipeline execution failed: segmenter crashed"]
        assert pipeline.get_stats().failed_executions == 1


class TestConfiguration:

    async def test_configuration_directory(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            (Path(tmpdir) / "policy.json").write_text(
                json.dumps({"policy": {"batch_size": 1, "retry_base_delay": 0}}), encoding="utf-8"
            )
            (Path(tmpdir) / "terminology.json").write_text(
                json.dumps({
                    "mappings": [{"source_term": "item", "target_term": "項目"}],
                    "protected_terms": ["Title"],
                }),
                encoding="utf-8",
            )
            service = FakeService()
            pipeline = TranslationPipeline(service, PipelineConfig(config_dir=tmpdir))

        assert pipeline.policy.batch_size == 1
        result = await pipeline.translate_document(SCENARIO)

        assert result.verified
        assert len(service.batches) == 2
        list_context = next(
            ctx for batch, ctx in zip(service.batches, service.contexts) if "item" in batch[0]
        )
        assert "item = 項目" in list_context
        assert "Do not translate the following terms:\n- Title" in list_context

    async def test_performance_stats_in_metadata(self, pipeline_factory):
        pipeline = pipeline_factory(FakeService())
        result = await pipeline.translate_document(SCENARIO)

        stats = result.metadata["performance_stats"]
        assert {"segment", "summarize", "repair", "reassemble", "pipeline_execution"} <= set(stats)
        assert stats["summarize"]["count"] == 1
        assert pipeline.get_stats().successful_executions == 1


class TestModuleFunction:

    async def test_budget_override(self):
        result = await translate_document(
            "aaaa\n\nbbbb\n\ncccc",
            FakeService(),
            budget_bytes=5,
            policy=fast_policy(),
        )

        assert result.chunk_count == 3
        assert result.document == "AAAA\n\nBBBB\n\nCCCC"


class TestStageLogging:

    async def test_summary_is_timed_once(self, pipeline_factory, caplog):
        pipeline = pipeline_factory(FakeService())

        with caplog.at_level(logging.DEBUG, logger="doc_translator"):
            await pipeline.translate_document(SCENARIO)

        assert "summarize completed in" not in caplog.text
        assert "translation pass completed in" in caplog.text
        assert pipeline.get_performance_stats()["summarize"]["count"] == 1
