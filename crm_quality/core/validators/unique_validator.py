"""
UniqueValidator - case-insensitive uniqueness of a field within one batch.
"""

from typing import Any

from crm_quality.core.dedup import UniquenessIndex
from crm_quality.core.values import is_empty_value

from .base_validator import BaseValidator


class UniqueValidator(BaseValidator):
    """
    Fails on the second and later occurrence of a value (compared lower-cased).

    Empty and null values are exempt. The index is shared with the owning
    rule engine, which clears it at the start of every batch.
    """

    def __init__(
        self,
        field_name: str,
        parameters: dict[str, Any] | None = None,
        index: UniquenessIndex | None = None,
    ):
        super().__init__(field_name, parameters)
        self.index = index if index is not None else UniquenessIndex()

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        if is_empty_value(value):
            return

        if self.index.check_and_add(self.field_name, value):
            self.fail(f"Value '{value}' already appeared in this batch")

    @property
    def rule_kind(self) -> str:
        return "unique"
