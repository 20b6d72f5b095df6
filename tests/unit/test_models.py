"""Unit tests for the core data models."""

from doc_translator.models import Chunk, LineItem, Mismatch, StructuralFingerprint, reassemble
from doc_translator.models.enums import LineKind, MismatchCategory
from doc_translator.models.verification import VerificationResult


class TestChunk:

    def test_with_text_keeps_separators(self):
        chunk = Chunk(0, "Hello", "\n\n", leading_separator="\n")
        translated = chunk.with_text("Bonjour")

        assert translated.text == "Bonjour"
        assert translated.trailing_separator == "\n\n"
        assert translated.leading_separator == "\n"
        assert chunk.text == "Hello"

    def test_byte_size_counts_utf8(self):
        assert Chunk(0, "héllo").byte_size == 6


class TestReassemble:

    def test_orders_by_ordinal(self):
        chunks = [Chunk(1, "b", "\n"), Chunk(0, "a", "\n\n", leading_separator="\n")]
        assert reassemble(chunks) == "\na\n\nb\n"

    def test_empty(self):
        assert reassemble([]) == ""


class TestLineItem:

    def test_translatable_render_substitutes_text(self):
        item = LineItem(LineKind.TRANSLATABLE, "## ", "Title")

        assert item.render() == "## Title"
        assert item.render("Titre") == "## Titre"

    def test_literal_render_ignores_substitute(self):
        item = LineItem(LineKind.LITERAL, "", "```")
        assert item.render("ignored") == "```"


class TestVerificationModels:

    def test_mismatch_description(self):
        chunk_level = Mismatch(2, MismatchCategory.LINKS, "links count differs")
        document_level = Mismatch(None, MismatchCategory.CHUNK_COUNT, "expected 2, got 1")

        assert chunk_level.describe() == "Chunk 3 [links] links count differs"
        assert document_level.describe().endswith("] expected 2, got 1")

    def test_result_from_mismatches(self):
        assert VerificationResult.from_mismatches([]).is_valid
        result = VerificationResult.from_mismatches([Mismatch(0, MismatchCategory.HEADERS, "x")])

        assert not result.is_valid
        assert result.to_dict()["mismatches"][0]["category"] == "headers"

    def test_empty_fingerprint(self):
        fingerprint = StructuralFingerprint()

        assert fingerprint.is_empty
        assert fingerprint.counts() == {"headers": 0, "lists": 0, "code": 0, "links": 0, "special": 0}
