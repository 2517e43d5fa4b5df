"""
CustomValidator - validates using a caller-supplied predicate.
"""

from typing import Any

from .base_validator import BaseValidator, ConfigurationError, ValidationFailure


class CustomValidator(BaseValidator):
    """
    Validates using a predicate function.

    Parameters:
    - predicate: Callable (value, record) -> bool; a falsy result fails the rule

    A predicate that raises also fails the rule for that record only:

        def has_contact_channel(value, record):
            return bool(record.get("email") or record.get("phone"))
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        self.predicate = self.parameters.get("predicate")
        if self.predicate is None:
            raise ConfigurationError("custom rule requires 'predicate' parameter")

        if not callable(self.predicate):
            raise ConfigurationError("custom rule 'predicate' must be callable")

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        try:
            passed = self.predicate(value, record)
        except Exception as e:
            raise ValidationFailure(
                rule_kind=self.rule_kind,
                field_name=self.field_name,
                message=f"Custom check raised {type(e).__name__}: {e}",
            ) from e

        if not passed:
            self.fail("Custom check failed")

    @property
    def rule_kind(self) -> str:
        return "custom"
