"""
RangeValidator - validates numeric values are within a specified range.
"""

from typing import Any

from .base_validator import BaseValidator, ConfigurationError, numeric_param


class RangeValidator(BaseValidator):
    """
    Validates that a numeric field is within a specified range.

    Non-numeric values (strings, booleans, None) are not checked.

    Parameters:
    - min: Minimum value (inclusive)
    - max: Maximum value (inclusive)
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        self.min_value = numeric_param(self.parameters, "min", "range")
        self.max_value = numeric_param(self.parameters, "max", "range")

        if self.min_value is None and self.max_value is None:
            raise ConfigurationError("range rule requires at least one of: min, max")

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        if isinstance(value, bool) or not isinstance(value, int | float):
            return

        if self.min_value is not None and value < self.min_value:
            self.fail(f"Value {value} is less than minimum {self.min_value}")

        if self.max_value is not None and value > self.max_value:
            self.fail(f"Value {value} exceeds maximum {self.max_value}")

    @property
    def rule_kind(self) -> str:
        return "range"
