"""
Exception hierarchy for the mapping and data quality engine.
"""


class CrmQualityError(Exception):
    """Base class for all engine errors."""


class ConfigurationError(CrmQualityError):
    """Raised when rules, transforms or settings are malformed."""


class ValidationFailure(CrmQualityError):
    """Raised by a validator when a rule does not pass."""

    def __init__(self, rule_kind: str, field_name: str, message: str):
        self.rule_kind = rule_kind
        self.field_name = field_name
        self.message = message
        super().__init__(f"[{rule_kind}] {field_name}: {message}")


class TransformationError(CrmQualityError):
    """Raised when a configured field transform throws."""

    def __init__(self, field_name: str, cause: Exception):
        self.field_name = field_name
        self.cause = cause
        super().__init__(f"Transform for '{field_name}' failed: {cause}")


class PersistenceError(CrmQualityError):
    """Raised by a job store when a write fails."""


class JobStateError(CrmQualityError):
    """Raised when an illegal job status transition is requested."""


class JobFailure(CrmQualityError):
    """Raised when an unexpected error aborts a cleansing job."""

    def __init__(self, job_id: str, message: str):
        self.job_id = job_id
        self.message = message
        super().__init__(f"Job {job_id} failed: {message}")
