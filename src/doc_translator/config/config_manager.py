"""Configuration Manager implementation for the document translator.

This module provides functionality to load, validate, and manage the
translation policy, terminology mappings and the do-not-translate list.
"""

import json
import logging
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from .models import (
    ConfigurationError,
    ConfigurationType,
    SystemConfiguration,
    TerminologyMapping,
    TranslationPolicy,
    ValidationResult,
)

logger = logging.getLogger(__name__)

_POSITIVE_INT_FIELDS = (
    "chunk_budget_bytes",
    "batch_size",
    "concurrency",
    "max_retry_attempts",
    "batch_retry_limit",
    "max_attempts",
)
_LANGUAGE_FIELDS = ("source_language", "target_language")


class ConfigurationManager:
    """
    Manager for translator configuration.

    Handles loading, validation, and access to the translation policy,
    terminology mappings and protected terms.
    """

    def __init__(self, config_dir: Optional[Union[str, Path]] = None):
        """
        Initialize the configuration manager.

        Args:
            config_dir: Optional directory path for configuration files.
        """
        self._config_dir = Path(config_dir) if config_dir else None
        self._configuration = SystemConfiguration()
        self._is_loaded = False

    @property
    def configuration(self) -> SystemConfiguration:
        """Get the current system configuration."""
        return self._configuration

    @property
    def policy(self) -> TranslationPolicy:
        """Get the active translation policy."""
        return self._configuration.policy

    @property
    def is_loaded(self) -> bool:
        """Check if configuration has been loaded."""
        return self._is_loaded

    # =========================================================================
    # Translation Policy Methods
    # =========================================================================

    def load_policy(
        self,
        source: Union[str, Path, Dict[str, Any]]
    ) -> ValidationResult:
        """
        Load and validate the translation policy.

        Fields missing from the source keep their defaults.

        Args:
            source: File path, or dictionary (optionally nested under "policy").

        Returns:
            ValidationResult indicating success or failure with details.

        Raises:
            ConfigurationError: If validation fails and the policy cannot be applied.
        """
        raw_data = self._parse_source(source)
        if not isinstance(raw_data, dict):
            raise ConfigurationError("Policy configuration must be a JSON object")
        policy_data = raw_data.get("policy", raw_data)

        result, policy = self._validate_policy(policy_data)
        if not result.is_valid or policy is None:
            raise ConfigurationError(
                "Translation policy validation failed",
                validation_result=result
            )

        self._configuration.policy = policy
        self._is_loaded = True
        logger.debug(f"Loaded translation policy: {policy.to_dict()}")
        return result

    def _validate_policy(
        self,
        data: Dict[str, Any]
    ) -> Tuple[ValidationResult, Optional[TranslationPolicy]]:
        """Validate a policy dictionary against the TranslationPolicy fields."""
        result = ValidationResult(is_valid=True)
        prefix = "Translation policy"
        known = {f.name for f in fields(TranslationPolicy)}

        for key in data:
            if key not in known:
                result.add_warning(f"{prefix}: Unknown field '{key}' ignored")

        for name in _POSITIVE_INT_FIELDS:
            if name not in data:
                continue
            value = data[name]
            # bool is an int subclass; reject it explicitly
            if isinstance(value, bool) or not isinstance(value, int):
                result.add_error(f"{prefix}: '{name}' must be an integer")
            elif value < 1:
                result.add_error(f"{prefix}: '{name}' must be positive")

        if "retry_base_delay" in data:
            delay = data["retry_base_delay"]
            if isinstance(delay, bool) or not isinstance(delay, (int, float)):
                result.add_error(f"{prefix}: 'retry_base_delay' must be a number")
            elif delay < 0:
                result.add_error(f"{prefix}: 'retry_base_delay' must be non-negative")

        if "summarize" in data and not isinstance(data["summarize"], bool):
            result.add_error(f"{prefix}: 'summarize' must be a boolean")

        for name in _LANGUAGE_FIELDS:
            if name in data:
                value = data[name]
                if not isinstance(value, str) or not value.strip():
                    result.add_error(f"{prefix}: '{name}' must be a non-empty string")

        if not result.is_valid:
            return result, None

        values = {k: v for k, v in data.items() if k in known}
        for name in _LANGUAGE_FIELDS:
            if name in values:
                values[name] = values[name].strip()
        if "retry_base_delay" in values:
            values["retry_base_delay"] = float(values["retry_base_delay"])
        policy = TranslationPolicy(**values)

        if policy.batch_retry_limit > policy.max_attempts:
            result.add_error(
                f"{prefix}: 'batch_retry_limit' ({policy.batch_retry_limit}) "
                f"must not exceed 'max_attempts' ({policy.max_attempts})"
            )
            return result, None

        return result, policy

    # =========================================================================
    # Terminology Methods
    # =========================================================================

    def load_terminology(
        self,
        source: Union[str, Path, Dict[str, Any], List[Dict[str, Any]]]
    ) -> ValidationResult:
        """
        Load and validate terminology mappings and protected terms.

        Supports loading from:
        - JSON file path
        - Dictionary with "mappings" and/or "protected_terms"
        - List of mapping dictionaries

        Args:
            source: File path, dictionary, or list of dictionaries.

        Returns:
            ValidationResult indicating success or failure with details.

        Raises:
            ConfigurationError: If validation fails and configuration cannot be applied.
        """
        raw_data = self._parse_source(source)

        protected_data: Any = []
        if isinstance(raw_data, dict):
            if "mappings" in raw_data or "protected_terms" in raw_data:
                mappings_data = raw_data.get("mappings", [])
                protected_data = raw_data.get("protected_terms", [])
            else:
                mappings_data = [raw_data]
        else:
            mappings_data = raw_data

        result = ValidationResult(is_valid=True)
        mappings: List[TerminologyMapping] = []

        for i, mapping_dict in enumerate(mappings_data):
            mapping_result, mapping = self._validate_terminology_mapping(
                mapping_dict, index=i
            )
            result = result.merge(mapping_result)
            if mapping:
                mappings.append(mapping)

        # Source terms are compared case-insensitively
        terms = [m.source_term.lower() for m in mappings]
        duplicates = {t for t in terms if terms.count(t) > 1}
        if duplicates:
            result.add_error(
                f"Duplicate terminology source terms found: {sorted(duplicates)}"
            )

        protected_result, protected_terms = self._validate_protected_terms(protected_data)
        result = result.merge(protected_result)

        if not result.is_valid:
            raise ConfigurationError(
                "Terminology validation failed",
                validation_result=result
            )

        self._configuration.terminology_mappings = mappings
        self._configuration.protected_terms = protected_terms
        self._is_loaded = True

        result = result.merge(self.validate_configuration())
        return result

    def _validate_terminology_mapping(
        self,
        data: Dict[str, Any],
        index: int = 0
    ) -> Tuple[ValidationResult, Optional[TerminologyMapping]]:
        """Validate a single terminology mapping dictionary."""
        result = ValidationResult(is_valid=True)
        prefix = f"Terminology mapping [{index}]"

        if not isinstance(data, dict):
            result.add_error(f"{prefix}: must be an object")
            return result, None

        for field_name in ("source_term", "target_term"):
            if field_name not in data:
                result.add_error(f"{prefix}: Missing required field '{field_name}'")
            elif not isinstance(data[field_name], str) or not data[field_name].strip():
                result.add_error(f"{prefix}: '{field_name}' must be a non-empty string")

        description = data.get("description")
        if description is not None and not isinstance(description, str):
            result.add_error(f"{prefix}: 'description' must be a string")

        if not result.is_valid:
            return result, None

        mapping = TerminologyMapping(
            source_term=data["source_term"].strip(),
            target_term=data["target_term"].strip(),
            description=description,
            metadata=data.get("metadata", {})
        )
        return result, mapping

    def _validate_protected_terms(self, data: Any) -> Tuple[ValidationResult, List[str]]:
        """Validate the do-not-translate list."""
        result = ValidationResult(is_valid=True)
        if not isinstance(data, list):
            result.add_error("Protected terms: must be a list of strings")
            return result, []

        terms: List[str] = []
        for i, term in enumerate(data):
            if not isinstance(term, str) or not term.strip():
                result.add_error(f"Protected term [{i}]: must be a non-empty string")
                continue
            term = term.strip()
            if term in terms:
                result.add_warning(f"Protected term '{term}' listed more than once")
                continue
            terms.append(term)
        return result, terms

    def add_terminology_mapping(self, mapping: TerminologyMapping) -> None:
        """
        Add a single mapping, replacing any mapping with the same source term.
        """
        existing = self._configuration.get_mapping(mapping.source_term)
        if existing is not None:
            self._configuration.terminology_mappings.remove(existing)
        self._configuration.terminology_mappings.append(mapping)

    def add_protected_term(self, term: str) -> None:
        """Add a term that must never be translated."""
        term = term.strip()
        if not term:
            raise ConfigurationError("Protected term must be a non-empty string")
        if term not in self._configuration.protected_terms:
            self._configuration.protected_terms.append(term)

    def find_terminology_matches(self, text: str) -> List[TerminologyMapping]:
        """Find all terminology mappings whose source term occurs in text."""
        return [m for m in self._configuration.terminology_mappings if m.matches(text)]

    # =========================================================================
    # Validation
    # =========================================================================

    def validate_configuration(
        self,
        config: Optional[SystemConfiguration] = None
    ) -> ValidationResult:
        """
        Check a configuration for cross-field consistency.

        Args:
            config: Configuration to check. Uses the current one if None.

        Returns:
            ValidationResult with errors for contradictions and warnings for
            suspicious but usable settings.
        """
        config = config or self._configuration
        result = ValidationResult(is_valid=True)

        policy = config.policy
        if policy.batch_retry_limit > policy.max_attempts:
            result.add_error(
                f"'batch_retry_limit' ({policy.batch_retry_limit}) exceeds "
                f"'max_attempts' ({policy.max_attempts})"
            )

        protected = {t.lower() for t in config.protected_terms}
        for mapping in config.terminology_mappings:
            if mapping.source_term.lower() in protected:
                result.add_warning(
                    f"Term '{mapping.source_term}' is both mapped and protected; "
                    f"the mapping to '{mapping.target_term}' will be ignored by "
                    f"most translators"
                )

        return result

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def _parse_source(
        self,
        source: Union[str, Path, Dict[str, Any], List[Dict[str, Any]]]
    ) -> Union[Dict[str, Any], List[Dict[str, Any]]]:
        """Parse configuration source to raw data."""
        if isinstance(source, (str, Path)):
            path = Path(source)
            if not path.exists():
                raise ConfigurationError(f"Configuration file not found: {path}")

            try:
                with open(path, "r", encoding="utf-8") as f:
                    return json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e

        return source

    def load_from_directory(self, config_dir: Union[str, Path]) -> ValidationResult:
        """
        Load all configuration files from a directory.

        Expects files named:
        - policy.json
        - terminology.json

        Missing files leave the corresponding defaults in place.

        Args:
            config_dir: Directory containing configuration files.

        Returns:
            Combined ValidationResult for all loaded configurations.
        """
        config_dir = Path(config_dir)
        result = ValidationResult(is_valid=True)

        policy_file = config_dir / f"{ConfigurationType.POLICY.value}.json"
        if policy_file.exists():
            try:
                result = result.merge(self.load_policy(policy_file))
            except ConfigurationError as e:
                result.add_error(f"Policy loading failed: {e.message}")
                if e.validation_result:
                    result = result.merge(e.validation_result)

        term_file = config_dir / f"{ConfigurationType.TERMINOLOGY.value}.json"
        if term_file.exists():
            try:
                result = result.merge(self.load_terminology(term_file))
            except ConfigurationError as e:
                result.add_error(f"Terminology loading failed: {e.message}")
                if e.validation_result:
                    result = result.merge(e.validation_result)

        self._config_dir = config_dir
        for warning in result.warnings:
            logger.warning(warning)
        return result

    def save_to_directory(
        self,
        config_dir: Optional[Union[str, Path]] = None
    ) -> None:
        """
        Save current configuration to a directory.

        Args:
            config_dir: Directory to save to. Uses current config_dir if None.
        """
        config_dir = Path(config_dir) if config_dir else self._config_dir
        if not config_dir:
            raise ConfigurationError("No configuration directory specified")

        config_dir.mkdir(parents=True, exist_ok=True)

        with open(config_dir / f"{ConfigurationType.POLICY.value}.json", "w", encoding="utf-8") as f:
            json.dump(
                {"policy": self._configuration.policy.to_dict()},
                f, indent=2, ensure_ascii=False
            )

        if self._configuration.terminology_mappings or self._configuration.protected_terms:
            term_data = {
                "mappings": self._mappings_to_list(),
                "protected_terms": list(self._configuration.protected_terms),
            }
            with open(config_dir / f"{ConfigurationType.TERMINOLOGY.value}.json", "w", encoding="utf-8") as f:
                json.dump(term_data, f, indent=2, ensure_ascii=False)

    def reset(self) -> None:
        """Reset configuration to defaults."""
        self._configuration = SystemConfiguration()
        self._is_loaded = False

    def _mappings_to_list(self) -> List[Dict[str, Any]]:
        return [
            {
                "source_term": m.source_term,
                "target_term": m.target_term,
                "description": m.description,
                "metadata": m.metadata,
            }
            for m in self._configuration.terminology_mappings
        ]

    def to_dict(self) -> Dict[str, Any]:
        """Export current configuration as a dictionary."""
        return {
            "version": self._configuration.version,
            "policy": self._configuration.policy.to_dict(),
            "terminology_mappings": self._mappings_to_list(),
            "protected_terms": list(self._configuration.protected_terms),
            "metadata": self._configuration.metadata,
        }
