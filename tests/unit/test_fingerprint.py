"""Unit tests for structural fingerprint extraction."""

import pytest

from doc_translator.analysis import FingerprintExtractor, fingerprint, is_part_of_list, list_level
from doc_translator.models import (
    CodeEntry,
    HeaderEntry,
    LinkEntry,
    ListEntry,
    SpecialEntry,
    StructuralFingerprint,
)
from doc_translator.models.enums import CodeKind, LinkType, ListType


class TestBasics:

    def test_plain_prose_has_empty_fingerprint(self):
        result = fingerprint("Just a sentence.\n\nAnd another one.")
        assert result.is_empty
        assert result == StructuralFingerprint()

    def test_extraction_is_deterministic(self):
        text = "# A\n\n- b\n\n`c` [d](http://e)\n"
        assert fingerprint(text) == fingerprint(text)

    def test_counts(self):
        counts = fingerprint("# A\n## B\n- c").counts()
        assert counts == {"headers": 2, "lists": 1, "code": 0, "links": 0, "special": 0}


class TestHeaders:

    def test_header_levels(self):
        result = fingerprint("# One\ntext\n### Three\n###### Six")
        assert result.headers == (HeaderEntry(1), HeaderEntry(3), HeaderEntry(6))

    def test_hash_without_space_is_not_a_header(self):
        assert fingerprint("#hashtag").headers == ()


class TestLists:

    def test_list_types_and_levels(self):
        text = "- a\n  - b\n    - c\n1. d\n2) e"
        assert fingerprint(text).lists == (
            ListEntry(ListType.UNORDERED, 1),
            ListEntry(ListType.UNORDERED, 2),
            ListEntry(ListType.UNORDERED, 2),
            ListEntry(ListType.ORDERED, 1),
            ListEntry(ListType.ORDERED, 1),
        )

    @pytest.mark.parametrize("indent,level", [(0, 1), (1, 1), (2, 2), (3, 2), (4, 2), (8, 3)])
    def test_list_level(self, indent, level):
        assert list_level(indent) == level

    def test_is_part_of_list(self):
        lines = ["- item", "  continued", "", "Paragraph", "    indented"]
        assert is_part_of_list(lines, 0)
        assert is_part_of_list(lines, 1)
        assert not is_part_of_list(lines, 3)
        assert not is_part_of_list(lines, 4)


class TestCode:

    def test_inline_code(self):
        result = fingerprint("Use `pip` and `pytest`.")
        assert result.code == (
            CodeEntry("", CodeKind.INLINE),
            CodeEntry("", CodeKind.INLINE),
        )

    def test_fenced_code_with_language(self):
        result = fingerprint("```python\nx = `1`\n```")
        assert result.code == (CodeEntry("python", CodeKind.FENCED),)

    def test_fence_closed_only_by_same_kind(self):
        result = fingerprint("~~~\n```\n~~~")
        assert result.code == (CodeEntry("", CodeKind.FENCED),)

    def test_fence_closed_by_delimiter_with_info_string(self):
        result = fingerprint("```py\n- a\n```py")
        assert result.code == (CodeEntry("py", CodeKind.FENCED),)

    def test_unterminated_fence(self):
        result = fingerprint("```js\nlet a = 1;")
        assert result.code == (CodeEntry("js", CodeKind.FENCED, unterminated=True),)

    def test_indented_code_after_blank_line(self):
        result = fingerprint("Text\n\n    code line")
        assert result.code == (CodeEntry("", CodeKind.INDENTED),)

    def test_indented_list_continuation_is_not_code(self):
        assert fingerprint("- item\n\n    more of the item").code == ()


class TestLinks:

    def test_link_types_grouped_in_order(self):
        text = (
            "<https://auto.example> [inline](http://a.example) "
            "[ref][r1] [self][]\n[r1]: http://b.example"
        )
        assert fingerprint(text).links == (
            LinkEntry(LinkType.INLINE, url="http://a.example"),
            LinkEntry(LinkType.REFERENCE, ref="r1"),
            LinkEntry(LinkType.REFERENCE, ref="self"),
            LinkEntry(LinkType.DEFINITION, url="http://b.example", ref="r1"),
            LinkEntry(LinkType.AUTOLINK, url="https://auto.example"),
        )


class TestSpecial:

    def test_containers_admonitions_and_callouts(self):
        text = "::: warning\nx\n:::\n!!! note\n> [!TIP]\n> body"
        assert fingerprint(text).special == (
            SpecialEntry("warning", "container"),
            SpecialEntry("note", "admonition"),
            SpecialEntry("tip", "callout"),
        )

    def test_front_matter_needs_closing_delimiter(self):
        assert fingerprint("---\ntitle: x\n---").special == (SpecialEntry("yaml", "front-matter"),)
        assert fingerprint("---\ntitle: x").special == ()

    def test_math(self):
        result = fingerprint("$$\nx\n$$\nInline $a+b$ here.")
        assert result.special == (
            SpecialEntry("math", "math-block"),
            SpecialEntry("math", "math-block"),
            SpecialEntry("math", "math-inline"),
        )

    def test_html_comment(self):
        assert fingerprint("text <!-- note --> text").special == (
            SpecialEntry("comment", "html-comment"),
        )

    def test_table_rows_outside_fences(self):
        text = "| a | b |\n|---|---|\n```\n| not a row |\n```"
        result = fingerprint(text)
        assert result.special == (
            SpecialEntry("table", "table-row"),
            SpecialEntry("table", "table-row"),
        )


class TestExtractor:

    def test_custom_extractor_matches_module_function(self):
        text = "# Title\n\n- item\n"
        assert FingerprintExtractor().extract(text) == fingerprint(text)
