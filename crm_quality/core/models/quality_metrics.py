"""
QualityMetrics model summarizing record quality as percentages.
"""

from pydantic import BaseModel, Field


class QualityMetrics(BaseModel):
    """
    Derived quality percentages, one decimal precision.

    Note: completeness mirrors accuracy; no separate completeness signal is computed.

    Attributes:
        completeness: Same value as accuracy
        accuracy: validated / total
        uniqueness: (total - duplicates) / total
        consistency: (total - errors) / total
        overall: Mean of the four metrics above
    """

    completeness: float = Field(0.0, ge=0.0, le=100.0)
    accuracy: float = Field(0.0, ge=0.0, le=100.0)
    uniqueness: float = Field(0.0, ge=0.0, le=100.0)
    consistency: float = Field(0.0, ge=0.0, le=100.0)
    overall: float = Field(0.0, ge=0.0, le=100.0)

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "completeness": 80.0,
                "accuracy": 80.0,
                "uniqueness": 90.0,
                "consistency": 80.0,
                "overall": 82.5
            }
        }
