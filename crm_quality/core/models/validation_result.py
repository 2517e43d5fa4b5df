"""
ValidationResult model representing the outcome of validating a batch (ephemeral).
"""

from typing import Dict, List

from pydantic import BaseModel, Field, field_validator

from .validation_issue import ValidationIssue


class ValidationResult(BaseModel):
    """
    Outcome of validating a batch of records.

    Attributes:
        is_valid: True iff no record produced an issue
        errors: Every issue in record order
    """

    is_valid: bool
    errors: List[ValidationIssue] = Field(default_factory=list)

    @field_validator("errors")
    @classmethod
    def check_valid_consistency(cls, v, info):
        """Validate that is_valid=True implies errors is empty."""
        if info.data.get("is_valid") and len(v) > 0:
            raise ValueError("is_valid=True but errors is not empty")
        return v

    def issues_by_record(self) -> Dict[int, List[ValidationIssue]]:
        """Group issues by record index, preserving order."""
        grouped: Dict[int, List[ValidationIssue]] = {}
        for issue in self.errors:
            grouped.setdefault(issue.record_index, []).append(issue)
        return grouped

    @property
    def invalid_record_indexes(self) -> List[int]:
        return sorted(self.issues_by_record())
