"""
ValidationRule model representing a declarative check applied to one field of every record.
"""

from typing import Any, Dict, Literal, get_args

from pydantic import BaseModel, Field

RuleKind = Literal["required", "format", "length", "range", "unique", "custom"]

RULE_KINDS = get_args(RuleKind)


class ValidationRule(BaseModel):
    """
    A configurable constraint applied to incoming records.

    Attributes:
        field: Which record field this rule applies to
        rule_kind: One of "required", "format", "length", "range", "unique", "custom"
        params: Kind-specific params (e.g. {"pattern": "..."} or {"min": 0, "max": 100});
                custom rules carry their predicate under "predicate"
        message: Message recorded on every issue this rule produces
        name: Optional rule name, defaults to "<field>_<rule_kind>"
        enabled: Whether the rule is active
    """

    field: str = Field(..., min_length=1)
    rule_kind: RuleKind
    params: Dict[str, Any] | None = None
    message: str = ""
    name: str | None = None
    enabled: bool = True

    @property
    def rule_name(self) -> str:
        return self.name or f"{self.field}_{self.rule_kind}"

    class Config:
        json_schema_extra = {
            "example": {
                "field": "email",
                "rule_kind": "format",
                "params": {"pattern": r"^[^\s@]+@[^\s@]+\.[^\s@]+$"},
                "message": "Invalid email format",
                "enabled": True
            }
        }
