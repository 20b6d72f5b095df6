"""Line-level Markdown syntax shared by the classifier and the line protector."""

import re
from typing import List, Optional

# Opening or closing fence; group 1 is the fence kind, group 2 the info string
FENCE_DELIMITER = re.compile(r"^[ \t]*(```|~~~)[`~]*(.*)$")

LINK_DEFINITION_LINE = re.compile(r"^[ \t]*\[[^\]]+\]:[ \t]*\S+")

FRONT_MATTER_DELIMITER = re.compile(r"^---[ \t]*\r?$")


def fence_kind(line: str) -> Optional[str]:
    """Return the fence kind (``\\`\\`\\``` or ``~~~``) if the line is a fence delimiter."""
    match = FENCE_DELIMITER.match(line)
    return match.group(1) if match else None


def closes_fence(line: str, open_kind: str) -> bool:
    """
    Whether the line closes a fence opened with ``open_kind``.

    Any delimiter of the same kind closes it, with or without an info string.
    """
    return fence_kind(line) == open_kind


def is_link_definition(line: str) -> bool:
    return LINK_DEFINITION_LINE.match(line) is not None


def is_blank(line: str) -> bool:
    return not line.strip()


def front_matter_end(lines: List[str]) -> Optional[int]:
    """
    Index of the line closing a leading front-matter block, or None when the
    first line does not open one or it is never closed.
    """
    if not lines or not FRONT_MATTER_DELIMITER.match(lines[0]):
        return None
    for index in range(1, len(lines)):
        if FRONT_MATTER_DELIMITER.match(lines[index]):
            return index
    return None


def is_front_matter_block(lines: List[str]) -> bool:
    """True when the lines are exactly one front-matter block."""
    return front_matter_end(lines) == len(lines) - 1
