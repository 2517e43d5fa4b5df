"""
RequiredFieldValidator - ensures a field is present and not null/empty.
"""

from typing import Any, Dict

from .base_validator import BaseValidator


class RequiredFieldValidator(BaseValidator):
    """
    Validates that a required field is present and not null/empty.

    Fails if:
    - Field is missing from the record
    - Field value is None
    - Field value is the empty string (whitespace-only strings pass)
    """

    def validate(self, value: Any, record: Dict[str, Any]) -> None:
        if self.field_name not in record:
            self.fail("Field is missing from record")

        if value is None:
            self.fail("Field value is null")

        if value == "":
            self.fail("Field value is empty string")

    @property
    def rule_kind(self) -> str:
        return "required"
