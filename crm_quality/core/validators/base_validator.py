"""
Base validator interface for all validation rules.

All validators must inherit from BaseValidator and implement the validate() method.
"""

from abc import ABC, abstractmethod
from typing import Any

from crm_quality.core.errors import ConfigurationError, ValidationFailure

__all__ = ["BaseValidator", "ValidationFailure", "ConfigurationError", "numeric_param"]


def numeric_param(parameters: dict[str, Any], key: str, rule_kind: str) -> float | int | None:
    """Read an optional numeric bound, rejecting anything that is not a number."""
    value = parameters.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ConfigurationError(f"{rule_kind} parameter '{key}' must be numeric, got {value!r}")
    return value


class BaseValidator(ABC):
    """
    Abstract base class for all validators.

    Each validator implements a specific rule kind
    (required, format, length, range, unique, custom).
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        """
        Initialize validator.

        Args:
            field_name: Name of the field to validate
            parameters: Rule-specific parameters (e.g., min/max for range)

        Raises:
            ConfigurationError: If the parameters are malformed
        """
        self.field_name = field_name
        self.parameters = parameters or {}

    @abstractmethod
    def validate(self, value: Any, record: dict[str, Any]) -> None:
        """
        Validate a value against this rule.

        Args:
            value: The field value to validate (None when missing)
            record: The entire record (for context-dependent validation)

        Raises:
            ValidationFailure: If validation fails
        """
        pass

    @property
    @abstractmethod
    def rule_kind(self) -> str:
        """Return the rule kind identifier."""
        pass

    def fail(self, message: str) -> None:
        raise ValidationFailure(rule_kind=self.rule_kind, field_name=self.field_name, message=message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(field={self.field_name}, params={self.parameters})"
