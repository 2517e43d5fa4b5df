"""
Validation rule implementations.

Provides validators for required fields, formats, lengths, ranges,
batch uniqueness and custom predicates.
"""

from .base_validator import BaseValidator, ValidationFailure
from .custom_validator import CustomValidator
from .length_validator import LengthValidator
from .range_validator import RangeValidator
from .regex_validator import FormatValidator
from .required_field_validator import RequiredFieldValidator
from .suggestions import suggest_remediation
from .unique_validator import UniqueValidator

__all__ = [
    "BaseValidator",
    "ValidationFailure",
    "RequiredFieldValidator",
    "FormatValidator",
    "LengthValidator",
    "RangeValidator",
    "UniqueValidator",
    "CustomValidator",
    "suggest_remediation",
]
