"""
Cleansing job execution: runner, persistence and record readers.
"""

from .job_runner import BatchOutcome, CleansingJobRunner, JobSummary
from .job_store import InMemoryJobStore, JobStore
from .settings import RunnerSettings

__all__ = [
    "BatchOutcome",
    "CleansingJobRunner",
    "JobSummary",
    "InMemoryJobStore",
    "JobStore",
    "RunnerSettings",
]
