"""Configuration management for the document translator."""

from .config_manager import ConfigurationManager
from .models import (
    ConfigurationType,
    TerminologyMapping,
    TranslationPolicy,
    SystemConfiguration,
    ConfigurationError,
    ValidationResult,
)

__all__ = [
    "ConfigurationManager",
    "ConfigurationType",
    "TerminologyMapping",
    "TranslationPolicy",
    "SystemConfiguration",
    "ConfigurationError",
    "ValidationResult",
]
