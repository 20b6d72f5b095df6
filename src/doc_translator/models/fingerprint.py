"""Structural fingerprint value objects."""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from .enums import CodeKind, LinkType, ListType


@dataclass(frozen=True)
class HeaderEntry:
    """ATX heading, identified by its hash count."""
    level: int


@dataclass(frozen=True)
class ListEntry:
    """List marker line with its indentation-derived nesting level."""
    list_type: ListType
    level: int


@dataclass(frozen=True)
class CodeEntry:
    """Inline span, fenced block or indented block."""
    language: str
    kind: CodeKind
    unterminated: bool = False


@dataclass(frozen=True)
class LinkEntry:
    """Inline, reference, definition or autolink."""
    link_type: LinkType
    url: Optional[str] = None
    ref: Optional[str] = None


@dataclass(frozen=True)
class SpecialEntry:
    """
    Non-prose token that must survive translation: containers, admonitions,
    callouts, front matter, math, HTML comments and table rows.
    """
    token_type: str
    syntax: str


@dataclass(frozen=True)
class StructuralFingerprint:
    """
    Comparable structural signature of a text span.

    Each category is an ordered tuple so two fingerprints compare by value.
    """
    headers: Tuple[HeaderEntry, ...] = field(default_factory=tuple)
    lists: Tuple[ListEntry, ...] = field(default_factory=tuple)
    code: Tuple[CodeEntry, ...] = field(default_factory=tuple)
    links: Tuple[LinkEntry, ...] = field(default_factory=tuple)
    special: Tuple[SpecialEntry, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not (self.headers or self.lists or self.code or self.links or self.special)

    def counts(self) -> dict:
        """Entry counts per category, handy for logging."""
        return {
            "headers": len(self.headers),
            "lists": len(self.lists),
            "code": len(self.code),
            "links": len(self.links),
            "special": len(self.special),
        }
