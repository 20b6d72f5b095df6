"""Enumerations for the document translation core."""

from enum import Enum


class SpanKind(Enum):
    """Classes of syntactically atomic spans protected during segmentation."""
    FENCED_CODE = "fenced_code"
    BLOCK_QUOTE = "block_quote"
    LIST_BLOCK = "list_block"
    TABLE = "table"
    HTML_BLOCK = "html_block"
    MATH_BLOCK = "math_block"
    FRONT_MATTER = "front_matter"


class ChunkStrategy(Enum):
    """Translation routes chosen by the chunk classifier."""
    LITERAL = "literal"
    LINE_PROTECTED = "line_protected"
    BATCH = "batch"


class LineKind(Enum):
    """Per-line classification used by the line protector."""
    LITERAL = "literal"
    TRANSLATABLE = "translatable"


class ListType(Enum):
    """Markdown list marker families."""
    UNORDERED = "unordered"
    ORDERED = "ordered"


class CodeKind(Enum):
    """Kinds of code constructs tracked by the fingerprint."""
    INLINE = "inline"
    FENCED = "fenced"
    INDENTED = "indented"


class LinkType(Enum):
    """Kinds of links tracked by the fingerprint."""
    INLINE = "inline"
    REFERENCE = "reference"
    DEFINITION = "definition"
    AUTOLINK = "autolink"


class MismatchCategory(Enum):
    """Categories of structural discrepancies reported by the verifier."""
    CHUNK_COUNT = "chunk_count"
    HEADERS = "headers"
    LISTS = "lists"
    CODE = "code"
    LINKS = "links"
    SPECIAL = "special"


class RepairStrategy(Enum):
    """Translation strategies the repair orchestrator can apply."""
    FULL_BATCH = "full_batch"
    LINE_PROTECTED = "line_protected"


class RepairPhase(Enum):
    """States of the repair state machine."""
    TRANSLATED = "translated"
    VERIFYING = "verifying"
    ESCALATE = "escalate"
    DONE = "done"
