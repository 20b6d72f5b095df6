"""Line-level protection of Markdown structure during translation."""

from .line_protector import LineProtector
from .line_patterns import PrefixedLine, build_line_classifiers

__all__ = [
    "LineProtector",
    "PrefixedLine",
    "build_line_classifiers",
]
