"""
Core data models for the mapping and data quality engine.

All models use Pydantic for runtime validation and type safety.
"""

from .cleansing_job import CleansingJob, JobStatus
from .mapping_suggestion import MappingSuggestion
from .quality_metrics import QualityMetrics
from .validation_issue import ValidationIssue
from .validation_result import ValidationResult
from .validation_rule import RULE_KINDS, ValidationRule

__all__ = [
    "MappingSuggestion",
    "ValidationRule",
    "RULE_KINDS",
    "ValidationIssue",
    "ValidationResult",
    "QualityMetrics",
    "CleansingJob",
    "JobStatus",
]
