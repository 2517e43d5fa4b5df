"""
CleansingJob model tracking a cleansing/loading job's lifecycle and progress counters.
"""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field


class JobStatus(str, Enum):
    """Lifecycle states of a cleansing job."""

    INITIALIZING = "initializing"
    PROCESSING = "processing"
    PAUSED = "paused"
    COMPLETED = "completed"
    COMPLETED_WITH_ERRORS = "completed_with_errors"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.COMPLETED_WITH_ERRORS, JobStatus.FAILED)


ALLOWED_TRANSITIONS: dict[JobStatus, frozenset[JobStatus]] = {
    JobStatus.INITIALIZING: frozenset({JobStatus.PROCESSING, JobStatus.FAILED}),
    JobStatus.PROCESSING: frozenset({
        JobStatus.PAUSED,
        JobStatus.COMPLETED,
        JobStatus.COMPLETED_WITH_ERRORS,
        JobStatus.FAILED,
    }),
    JobStatus.PAUSED: frozenset({JobStatus.PROCESSING, JobStatus.FAILED}),
    JobStatus.COMPLETED: frozenset(),
    JobStatus.COMPLETED_WITH_ERRORS: frozenset(),
    JobStatus.FAILED: frozenset(),
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CleansingJob(BaseModel):
    """
    A cleansing/loading job over one or more sequential record batches.

    Invariant: validated_records + error_count == processed_records at every checkpoint.

    Attributes:
        id: Job identifier
        object_type: Object type tag ("contacts", "accounts", ...)
        status: Current lifecycle state
        total_records: Records announced so far (grows with each batch)
        processed_records: Records fully evaluated
        validated_records: Processed records with zero issues
        error_count: Processed records with at least one issue
        duplicate_records: Job-wide duplicate occurrences
        error_message: Captured message when the job failed
    """

    id: str = Field(..., min_length=1)
    object_type: str = ""
    status: JobStatus = JobStatus.INITIALIZING
    total_records: int = Field(0, ge=0)
    processed_records: int = Field(0, ge=0)
    validated_records: int = Field(0, ge=0)
    error_count: int = Field(0, ge=0)
    duplicate_records: int = Field(0, ge=0)
    error_message: str | None = None
    created_at: datetime = Field(default_factory=_utcnow)
    completed_at: datetime | None = None

    def can_transition_to(self, status: JobStatus) -> bool:
        return status in ALLOWED_TRANSITIONS[self.status]

    @property
    def is_consistent(self) -> bool:
        return self.validated_records + self.error_count == self.processed_records

    class Config:
        validate_assignment = True
        json_schema_extra = {
            "example": {
                "id": "job_20261019_001",
                "object_type": "contacts",
                "status": "completed_with_errors",
                "total_records": 100,
                "processed_records": 100,
                "validated_records": 80,
                "error_count": 20,
                "duplicate_records": 10
            }
        }
