"""Per-document translation context."""

from dataclasses import dataclass, field, replace
from typing import Optional, Sequence, Tuple

from ..config.models import SystemConfiguration, TerminologyMapping


@dataclass(frozen=True)
class TranslationContext:
    """
    Guidance threaded through every translation call of one document.

    Built once per document and never mutated; ``with_summary`` returns a
    new context.
    """
    summary: str = ""
    terminology: Tuple[TerminologyMapping, ...] = field(default_factory=tuple)
    protected_terms: Tuple[str, ...] = field(default_factory=tuple)
    source_language: Optional[str] = None
    target_language: Optional[str] = None

    @classmethod
    def from_configuration(
        cls,
        configuration: SystemConfiguration,
        summary: str = ""
    ) -> "TranslationContext":
        return cls(
            summary=summary,
            terminology=tuple(configuration.terminology_mappings),
            protected_terms=tuple(configuration.protected_terms),
            source_language=configuration.policy.source_language,
            target_language=configuration.policy.target_language,
        )

    def with_summary(self, summary: str) -> "TranslationContext":
        return replace(self, summary=summary)

    def relevant_terminology(self, texts: Optional[Sequence[str]] = None) -> Tuple[TerminologyMapping, ...]:
        """Mappings whose source term occurs in any of ``texts`` (all if None)."""
        if texts is None:
            return self.terminology
        return tuple(m for m in self.terminology if any(m.matches(t) for t in texts))

    def render(self, texts: Optional[Sequence[str]] = None) -> Optional[str]:
        """
        Render the context string passed to the translation capability.

        Args:
            texts: Texts of the current call; restricts the term mappings to
                those that occur in them.

        Returns:
            Context text, or None when there is nothing to say.
        """
        sections = []
        if self.source_language and self.target_language:
            sections.append(f"Translate from {self.source_language} to {self.target_language}.")
        elif self.target_language:
            sections.append(f"Translate to {self.target_language}.")

        if self.summary.strip():
            sections.append(f"Document summary:\n{self.summary.strip()}")

        terminology = self.relevant_terminology(texts)
        if terminology:
            sections.append(
                "Use the following term mappings:\n"
                + "\n".join(f"- {m.render()}" for m in terminology)
            )

        if self.protected_terms:
            sections.append(
                "Do not translate the following terms:\n"
                + "\n".join(f"- {term}" for term in self.protected_terms)
            )

        return "\n\n".join(sections) if sections else None
