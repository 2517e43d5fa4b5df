"""
MappingSuggestion model representing a proposed source to destination field correspondence.
"""

from pydantic import BaseModel, Field


class MappingSuggestion(BaseModel):
    """
    A proposed correspondence between a source field and a destination field.

    Attributes:
        source_field: Field name in the source CRM
        destination_field: Field name in the destination CRM
        confidence: Score in [0, 1] fixed by the matching tier that produced it
        is_required: Whether the lexicon marks the concept as required
        reason: Human-readable rationale shown to the reviewer
    """

    source_field: str = Field(..., min_length=1)
    destination_field: str = Field(..., min_length=1)
    confidence: float = Field(..., ge=0.0, le=1.0)
    is_required: bool = False
    reason: str = ""

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "source_field": "Phone Number",
                "destination_field": "phone",
                "confidence": 0.95,
                "is_required": False,
                "reason": "Standard field pattern match for contact data"
            }
        }
