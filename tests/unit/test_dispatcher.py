"""Unit tests for strategy dispatch to the translation capability."""

from typing import List, Optional

import pytest

from doc_translator.config import TerminologyMapping, TranslationPolicy
from doc_translator.exceptions import TranslationCountMismatchError, TranslationServiceError
from doc_translator.interfaces import ITranslationService
from doc_translator.models import Chunk, RepairStrategy
from doc_translator.translation import ChunkTranslator, FunctionTranslationService, TranslationContext

pytestmark = pytest.mark.anyio


class UpperCaseService(ITranslationService):
    """Upper-cases every fragment; can drop a fragment on chosen calls."""

    def __init__(self, short_calls=()):
        self.batches: List[List[str]] = []
        self.contexts: List[Optional[str]] = []
        self.short_calls = set(short_calls)

    async def translate_batch(self, texts, context=None):
        self.batches.append(list(texts))
        self.contexts.append(context)
        result = [t.upper() for t in texts]
        if len(self.batches) in self.short_calls:
            result = result[:-1]
        return result

    async def summarize(self, text):
        return "summary"


def fast_policy(**overrides):
    values = {"retry_base_delay": 0.0}
    values.update(overrides)
    return TranslationPolicy(**values)


MIXED = [
    Chunk(0, "Intro paragraph.", "\n\n"),
    Chunk(1, "```\ncode\n```", "\n\n"),
    Chunk(2, "Middle paragraph.", "\n\n"),
    Chunk(3, "Run it:\n```\nmake\n```", "\n"),
]


class TestFullBatch:

    async def test_routes_by_classification(self):
        service = UpperCaseService()
        translator = ChunkTranslator(service, fast_policy())

        result = await translator.translate(MIXED, TranslationContext(), RepairStrategy.FULL_BATCH)

        assert [c.text for c in result] == [
            "INTRO PARAGRAPH.",
            "```\ncode\n```",
            "MIDDLE PARAGRAPH.",
            "RUN IT:\n```\nmake\n```",
        ]
        assert sorted(service.batches) == sorted([
            ["Intro paragraph.", "Middle paragraph."],
            ["Run it:"],
        ])
        assert translator.calls == 2

    async def test_separators_and_ordinals_kept(self):
        translator = ChunkTranslator(UpperCaseService(), fast_policy())
        result = await translator.translate(MIXED, TranslationContext())

        assert [(c.ordinal, c.trailing_separator) for c in result] == [
            (c.ordinal, c.trailing_separator) for c in MIXED
        ]

    async def test_batches_are_grouped_by_size(self):
        service = UpperCaseService()
        translator = ChunkTranslator(service, fast_policy(batch_size=2))
        chunks = [Chunk(i, f"paragraph {i}") for i in range(5)]

        result = await translator.translate(chunks, TranslationContext())

        assert sorted(len(b) for b in service.batches) == [1, 2, 2]
        assert [c.text for c in result] == [f"PARAGRAPH {i}" for i in range(5)]


class TestLineProtected:

    async def test_every_chunk_is_line_protected(self):
        service = UpperCaseService()
        translator = ChunkTranslator(service, fast_policy())
        chunks = [Chunk(0, "# Title\n\nHello", "\n\n"), Chunk(1, "```\ncode\n```")]

        result = await translator.translate(chunks, TranslationContext(), RepairStrategy.LINE_PROTECTED)

        assert [c.text for c in result] == ["# TITLE\n\nHELLO", "```\ncode\n```"]
        assert service.batches == [["Title", "Hello"]]


class TestContextAndRetry:

    async def test_context_is_rendered_per_call(self):
        service = UpperCaseService()
        translator = ChunkTranslator(service, fast_policy())
        context = TranslationContext(
            summary="About git",
            terminology=(TerminologyMapping("commit", "提交"), TerminologyMapping("branch", "分支")),
        )

        await translator.translate([Chunk(0, "Write a commit message.")], context)

        assert len(service.contexts) == 1
        assert "Document summary:\nAbout git" in service.contexts[0]
        assert "commit = 提交" in service.contexts[0]
        assert "branch" not in service.contexts[0]

    async def test_count_mismatch_is_retried(self):
        service = UpperCaseService(short_calls={1})
        translator = ChunkTranslator(service, fast_policy())

        result = await translator.translate([Chunk(0, "a"), Chunk(1, "b")], TranslationContext())

        assert [c.text for c in result] == ["A", "B"]
        assert len(service.batches) == 2

    async def test_persistent_mismatch_is_raised(self):
        service = UpperCaseService(short_calls={1, 2})
        translator = ChunkTranslator(service, fast_policy(max_retry_attempts=2))

        with pytest.raises(TranslationCountMismatchError):
            await translator.translate([Chunk(0, "a")], TranslationContext())

        assert len(service.batches) == 2


class TestFunctionTranslationService:

    async def test_wraps_coroutines(self):
        async def translate(texts, context):
            return [f"{context}:{t}" for t in texts]

        async def summarize(text):
            return text[:3]

        service = FunctionTranslationService(translate, summarize)

        assert await service.translate_batch(["a"], "ctx") == ["ctx:a"]
        assert await service.summarize("abcdef") == "abc"

    async def test_missing_summarize_is_not_retryable(self):
        async def translate(texts, context):
            return texts

        service = FunctionTranslationService(translate)

        with pytest.raises(TranslationServiceError) as exc_info:
            await service.summarize("text")

        assert not exc_info.value.retryable
