"""
Persistence collaborator for cleansing jobs.

Stores receive job snapshots at creation, at every checkpoint and on every
status transition, plus the issues found. Implementations must raise
PersistenceError when a write fails.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Sequence

from crm_quality.core.errors import PersistenceError
from crm_quality.core.models import CleansingJob, ValidationIssue


class JobStore(ABC):
    """Abstract job persistence."""

    @abstractmethod
    def create_job(self, job: CleansingJob) -> None:
        """Persist a newly created job."""
        pass

    @abstractmethod
    def save_checkpoint(self, job: CleansingJob) -> None:
        """Persist progress counters."""
        pass

    @abstractmethod
    def save_issues(self, job_id: str, issues: Sequence[ValidationIssue]) -> None:
        """Append issues found on one record."""
        pass

    @abstractmethod
    def update_status(self, job: CleansingJob) -> None:
        """Persist a status transition."""
        pass


class InMemoryJobStore(JobStore):
    """
    Keeps job snapshots and issues in memory.

    Used by the CLI and tests; every write stores a copy so later mutation
    of the live job does not leak into stored snapshots.
    """

    def __init__(self):
        self.jobs: Dict[str, CleansingJob] = {}
        self.checkpoints: Dict[str, List[CleansingJob]] = {}
        self.status_history: Dict[str, List[str]] = {}
        self.issues: Dict[str, List[ValidationIssue]] = {}

    def create_job(self, job: CleansingJob) -> None:
        if job.id in self.jobs:
            raise PersistenceError(f"Job {job.id} already exists")
        self.jobs[job.id] = job.model_copy()
        self.checkpoints[job.id] = []
        self.status_history[job.id] = [job.status.value]
        self.issues[job.id] = []

    def save_checkpoint(self, job: CleansingJob) -> None:
        self._require(job.id)
        snapshot = job.model_copy()
        self.jobs[job.id] = snapshot
        self.checkpoints[job.id].append(snapshot)

    def save_issues(self, job_id: str, issues: Sequence[ValidationIssue]) -> None:
        self._require(job_id)
        self.issues[job_id].extend(issues)

    def update_status(self, job: CleansingJob) -> None:
        self._require(job.id)
        self.jobs[job.id] = job.model_copy()
        self.status_history[job.id].append(job.status.value)

    def get_job(self, job_id: str) -> CleansingJob:
        self._require(job_id)
        return self.jobs[job_id]

    def get_issues(self, job_id: str) -> List[ValidationIssue]:
        """Issues of a job ordered by record index."""
        self._require(job_id)
        return sorted(self.issues[job_id], key=lambda issue: issue.record_index)

    def _require(self, job_id: str) -> None:
        if job_id not in self.jobs:
            raise PersistenceError(f"Unknown job {job_id}")
