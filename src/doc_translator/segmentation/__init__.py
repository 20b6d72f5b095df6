"""Document segmentation into translation chunks."""

from .segmenter import DEFAULT_BUDGET_BYTES, Segmenter, normalize_line_endings, segment
from .span_patterns import (
    BlockPattern,
    DelimitedBlockMatcher,
    RegexSpanMatcher,
    SpanPattern,
    build_default_matchers,
    find_fenced_regions,
)

__all__ = [
    "DEFAULT_BUDGET_BYTES",
    "Segmenter",
    "normalize_line_endings",
    "segment",
    "BlockPattern",
    "DelimitedBlockMatcher",
    "RegexSpanMatcher",
    "SpanPattern",
    "build_default_matchers",
    "find_fenced_regions",
]
