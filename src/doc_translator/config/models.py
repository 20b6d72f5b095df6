"""Data models for configuration management."""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ConfigurationType(Enum):
    """Types of configuration supported by the translator."""
    POLICY = "policy"
    TERMINOLOGY = "terminology"


@dataclass
class TranslationPolicy:
    """
    Tunable limits for segmentation, concurrency, retry and repair.

    The repair loop re-runs full batch translation while the attempt counter
    is below ``batch_retry_limit`` and falls back to line-protected
    translation until ``max_attempts`` is reached.
    """
    chunk_budget_bytes: int = 2000
    batch_size: int = 10
    concurrency: int = 20
    max_retry_attempts: int = 10
    retry_base_delay: float = 1.0  # seconds; attempt n waits n * base
    batch_retry_limit: int = 3
    max_attempts: int = 10
    summarize: bool = True
    source_language: str = "en"
    target_language: str = "zh-TW"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class TerminologyMapping:
    """
    Fixed translation for a domain term.

    Mappings are passed to the translation capability as guidance; they are
    not substituted by this package.
    """
    source_term: str
    target_term: str
    description: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def matches(self, text: str) -> bool:
        """Check if the source term occurs in text (case-insensitive)."""
        return self.source_term.lower() in text.lower()

    def render(self) -> str:
        line = f"{self.source_term} = {self.target_term}"
        if self.description:
            line += f" ({self.description})"
        return line


@dataclass
class ValidationResult:
    """Result of configuration validation."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        """Add an error message."""
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str) -> None:
        """Add a warning message."""
        self.warnings.append(message)

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """Merge another validation result into this one."""
        return ValidationResult(
            is_valid=self.is_valid and other.is_valid,
            errors=self.errors + other.errors,
            warnings=self.warnings + other.warnings
        )


class ConfigurationError(Exception):
    """Exception raised for configuration errors."""

    def __init__(self, message: str, validation_result: Optional[ValidationResult] = None):
        super().__init__(message)
        self.message = message
        self.validation_result = validation_result


@dataclass
class SystemConfiguration:
    """
    Complete translator configuration.

    Aggregates the policy, terminology mappings and the do-not-translate list.
    """
    policy: TranslationPolicy = field(default_factory=TranslationPolicy)
    terminology_mappings: List[TerminologyMapping] = field(default_factory=list)
    protected_terms: List[str] = field(default_factory=list)
    version: int = 1
    metadata: Dict[str, Any] = field(default_factory=dict)

    def get_mapping(self, source_term: str) -> Optional[TerminologyMapping]:
        """Get a terminology mapping by its source term (case-insensitive)."""
        wanted = source_term.lower()
        for mapping in self.terminology_mappings:
            if mapping.source_term.lower() == wanted:
                return mapping
        return None
