"""
ValidationIssue model representing a single rule failure on a single record.
"""

from typing import Literal

from pydantic import BaseModel, Field

ErrorKind = Literal[
    "required",
    "format",
    "length",
    "range",
    "unique",
    "custom",
    "duplicate",
    "transformation_error",
]


class ValidationIssue(BaseModel):
    """
    The record of one failing rule evaluation or duplicate detection.

    Attributes:
        record_index: Position of the record in its batch (or in the job)
        field_name: Field the issue refers to
        error_kind: Rule kind that failed, "duplicate" or "transformation_error"
        message: Human-facing description
        raw_value: Offending value rendered as text (None when absent)
        suggestion: Optional remediation hint
    """

    record_index: int = Field(..., ge=0)
    field_name: str
    error_kind: ErrorKind
    message: str
    raw_value: str | None = None
    suggestion: str | None = None

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "record_index": 4,
                "field_name": "email",
                "error_kind": "format",
                "message": "Invalid email format",
                "raw_value": "jane.doe example.com",
                "suggestion": "Add the missing @ symbol: jane.doeexample.com@example.com"
            }
        }
