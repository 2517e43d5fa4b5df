"""
LengthValidator - validates string values are within a length range.
"""

from typing import Any

from .base_validator import BaseValidator, ConfigurationError, numeric_param


class LengthValidator(BaseValidator):
    """
    Validates the length of string values. Non-string values are not checked.

    Parameters:
    - min: Minimum length (inclusive)
    - max: Maximum length (inclusive)
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        self.min_length = numeric_param(self.parameters, "min", "length")
        self.max_length = numeric_param(self.parameters, "max", "length")

        if self.min_length is None and self.max_length is None:
            raise ConfigurationError("length rule requires at least one of: min, max")

        if self.min_length is not None and self.max_length is not None and self.min_length > self.max_length:
            raise ConfigurationError(f"length rule has min {self.min_length} greater than max {self.max_length}")

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        if not isinstance(value, str):
            return

        if self.min_length is not None and len(value) < self.min_length:
            self.fail(f"Length {len(value)} is shorter than minimum {self.min_length}")

        if self.max_length is not None and len(value) > self.max_length:
            self.fail(f"Length {len(value)} exceeds maximum {self.max_length}")

    @property
    def rule_kind(self) -> str:
        return "length"
