"""
Cleansing job orchestration.

Coordinates the flow for each record: transform → validate → deduplicate → count,
with periodic checkpoints and a status lifecycle:

    initializing → processing ⇄ paused
    processing → completed | completed_with_errors | failed
"""

from collections import deque
from datetime import datetime, timezone
from typing import Any, Callable, Deque, Dict, Iterable, List, Mapping, Sequence, Tuple
from uuid import uuid4

from pydantic import BaseModel, Field

from crm_quality.core.dedup import DeduplicationTracker
from crm_quality.core.errors import JobFailure, JobStateError, PersistenceError
from crm_quality.core.models import CleansingJob, JobStatus, QualityMetrics, ValidationIssue
from crm_quality.core.quality import QualityScorer
from crm_quality.core.rules import RuleEngine
from crm_quality.observability import metrics
from crm_quality.observability.logger import get_logger, job_context, log_operation

from .job_store import InMemoryJobStore, JobStore
from .settings import RunnerSettings

logger = get_logger(__name__)


class BatchOutcome(BaseModel):
    """
    Counters and issues for the records processed by one process_batch()/resume() call.

    paused is True when the batch stopped early; the rest of it is kept on the
    runner until resume().
    """

    processed: int = 0
    validated: int = 0
    errors: int = 0
    duplicates: int = 0
    issues: List[ValidationIssue] = Field(default_factory=list)
    paused: bool = False


class JobSummary(BaseModel):
    """Final job snapshot with its quality metrics and every issue found."""

    job: CleansingJob
    metrics: QualityMetrics
    issues: List[ValidationIssue] = Field(default_factory=list)

    @property
    def error_records(self) -> List[int]:
        return sorted({issue.record_index for issue in self.issues})


class CleansingJobRunner:
    """
    Runs record batches of one job through the rule engine and the
    deduplication tracker, in order.

    The engine's "unique" index is reset at the start of every batch, while the
    tracker's index lives for the whole job. Records of one job are processed
    sequentially; independent jobs need independent runners.

    Persistence is split by severity:
    - checkpoint and issue writes are fail-open (logged, counted, ignored)
    - status writes are fail-closed (the job is marked failed and JobFailure raised)
    """

    def __init__(
        self,
        engine: RuleEngine,
        tracker: DeduplicationTracker | None = None,
        store: JobStore | None = None,
        object_type: str = "",
        job_id: str | None = None,
        settings: RunnerSettings | None = None,
        should_continue: Callable[[], bool] | None = None,
        scorer: QualityScorer | None = None,
    ):
        """
        Initialize the runner.

        Args:
            engine: Rule engine built for the job's object type
            tracker: Job-wide duplicate tracker (defaults to settings.dedup_keys)
            store: Job persistence (defaults to an in-memory store)
            object_type: Object type tag recorded on the job and metrics
            job_id: Job identifier (generated when omitted)
            settings: Checkpoint interval, dedup keys and batch size
            should_continue: Cooperative check evaluated before each record; False pauses the job
            scorer: Quality scorer used by finish()
        """
        self.settings = settings or RunnerSettings()
        self.engine = engine
        self.tracker = tracker or DeduplicationTracker(self.settings.dedup_keys)
        self.store = store or InMemoryJobStore()
        self.scorer = scorer or QualityScorer()
        self.should_continue = should_continue
        self.object_type = object_type

        self.job = CleansingJob(
            id=job_id or f"job_{uuid4().hex[:12]}",
            object_type=object_type,
        )
        self.issues: List[ValidationIssue] = []

        self._started = False
        self._next_index = 0
        self._pending: Deque[Tuple[int, Mapping[str, Any]]] = deque()
        self._backlog: Deque[List[Mapping[str, Any]]] = deque()
        self._outcome = BatchOutcome()

    @classmethod
    def for_object_type(
        cls,
        object_type: str,
        settings: RunnerSettings | None = None,
        **kwargs,
    ) -> "CleansingJobRunner":
        """Build a runner with the default rules of an object type and settings from the environment."""
        settings = settings or RunnerSettings.from_env()
        return cls(
            RuleEngine.for_object_type(object_type),
            object_type=object_type,
            settings=settings,
            **kwargs,
        )

    @property
    def is_paused(self) -> bool:
        return self.job.status == JobStatus.PAUSED

    def start(self) -> CleansingJob:
        """
        Register the job with the store.

        Raises:
            JobStateError: If the job was already started
            JobFailure: If the store cannot create the job
        """
        if self._started:
            raise JobStateError(f"Job {self.job.id} already started")

        try:
            self.store.create_job(self.job)
        except PersistenceError as e:
            raise self._abort(e) from e

        self._started = True
        logger.info(
            f"Started cleansing job {self.job.id}",
            extra={"job_id": self.job.id, "object_type": self.object_type},
        )
        return self.job

    def process_batch(self, records: Sequence[Mapping[str, Any]]) -> BatchOutcome:
        """
        Process the next batch of the job.

        Record indexes on issues are job-global: the first record of the second
        batch continues numbering where the first batch ended.

        Args:
            records: Ordered records (field name -> value)

        Returns:
            BatchOutcome for the records processed before completion or pause

        Raises:
            JobStateError: If the job is paused or already finished
            JobFailure: If an unexpected error aborts the job
        """
        self._ensure_not_terminal()
        if self.is_paused:
            raise JobStateError(f"Job {self.job.id} is paused; resume it before submitting a batch")

        records = list(records)
        self.job.total_records += len(records)
        return self._start_batch(records)

    def _start_batch(self, records: List[Mapping[str, Any]]) -> BatchOutcome:
        """Process a batch whose records are already counted in total_records."""
        if not self._started:
            self.start()
        if self.job.status == JobStatus.INITIALIZING:
            self._transition(JobStatus.PROCESSING)

        metrics.batch_size.labels(object_type=self.object_type).observe(len(records))

        self.engine.reset_uniqueness()
        self._pending = deque(
            (self._next_index + offset, record) for offset, record in enumerate(records)
        )
        self._next_index += len(records)
        self._outcome = BatchOutcome()

        logger.debug(
            f"Processing batch of {len(records)} records",
            extra={"job_id": self.job.id, "batch_size": len(records)},
        )
        return self._drain()

    def resume(self) -> BatchOutcome:
        """
        Continue a paused batch from the first unprocessed record.

        The engine's uniqueness index is kept, so the batch sees the same
        "unique" results as an uninterrupted run.
        Batches still queued by run() are not touched; call run() to process them.

        Raises:
            JobStateError: If the job is not paused
        """
        if not self.is_paused:
            raise JobStateError(f"Job {self.job.id} is not paused")

        self._transition(JobStatus.PROCESSING)
        self._outcome = BatchOutcome()
        return self._drain()

    def finish(self) -> JobSummary:
        """
        Close the job as completed (no error records) or completed_with_errors.

        Returns:
            JobSummary with quality metrics over the processed records

        Raises:
            JobStateError: If the job is paused or finished, or batches queued by run() remain
        """
        if self.is_paused:
            raise JobStateError(f"Job {self.job.id} is paused; resume it before finishing")
        self._ensure_not_terminal()
        if self._backlog:
            raise JobStateError(
                f"Job {self.job.id} has {len(self._backlog)} queued batches; call run() to process them"
            )

        if not self._started:
            self.start()
        if self.job.status == JobStatus.INITIALIZING:
            self._transition(JobStatus.PROCESSING)

        final_status = JobStatus.COMPLETED if self.job.error_count == 0 else JobStatus.COMPLETED_WITH_ERRORS
        self._transition(final_status)

        quality = self.scorer.score_job(self.job)
        metrics.quality_score.labels(object_type=self.object_type).set(quality.overall)
        metrics.jobs_finished_total.labels(object_type=self.object_type, status=final_status.value).inc()

        logger.info(
            f"Job {self.job.id} finished: {self.job.validated_records} valid, "
            f"{self.job.error_count} with errors, {self.job.duplicate_records} duplicates",
            extra={
                "job_id": self.job.id,
                "status": final_status.value,
                "overall_quality": quality.overall,
            },
        )
        return JobSummary(job=self.job.model_copy(), metrics=quality, issues=list(self.issues))

    def run(
        self,
        records: Iterable[Mapping[str, Any]] = (),
        batch_size: int | None = None,
    ) -> JobSummary | None:
        """
        Split records into batches, process them all and finish the job.

        The records count towards total_records as soon as they are queued.
        Calling run() again on a paused job resumes it and continues with the
        remaining batches.

        Args:
            records: Records to append to the job's backlog
            batch_size: Records per batch (defaults to settings.batch_size)

        Returns:
            JobSummary, or None if the job was paused
        """
        size = batch_size or self.settings.batch_size
        records = list(records)
        if records:
            self._ensure_not_terminal()
            self.job.total_records += len(records)
            for start in range(0, len(records), size):
                self._backlog.append(records[start:start + size])

        with job_context(job_id=self.job.id, object_type=self.object_type), \
                log_operation("Running cleansing job", logger=logger):
            if self.is_paused and self.resume().paused:
                return None

            while self._backlog:
                outcome = self._start_batch(self._backlog.popleft())
                if outcome.paused:
                    return None

            return self.finish()

    def _ensure_not_terminal(self) -> None:
        if self.job.status.is_terminal:
            raise JobStateError(f"Job {self.job.id} is already {self.job.status.value}")

    def _drain(self) -> BatchOutcome:
        outcome = self._outcome
        try:
            while self._pending:
                if self.should_continue is not None and not self.should_continue():
                    self._pause()
                    outcome.paused = True
                    return outcome

                index, record = self._pending.popleft()
                self._process_record(index, record, outcome)

                if not self._pending or self.job.processed_records % self.settings.checkpoint_interval == 0:
                    self._checkpoint()
        except JobFailure:
            raise
        except Exception as e:
            raise self._abort(e) from e

        return outcome

    def _process_record(self, index: int, record: Mapping[str, Any], outcome: BatchOutcome) -> None:
        payload, issues = self.engine.evaluate_record(record, index)

        duplicate = self.tracker.check(payload, index)
        if duplicate is not None:
            issues.append(duplicate)
            self.job.duplicate_records += 1
            outcome.duplicates += 1
            metrics.duplicates_detected_total.labels(object_type=self.object_type).inc()

        self.job.processed_records += 1
        outcome.processed += 1
        if issues:
            self.job.error_count += 1
            outcome.errors += 1
        else:
            self.job.validated_records += 1
            outcome.validated += 1

        metrics.records_processed_total.labels(
            object_type=self.object_type,
            status="invalid" if issues else "valid",
        ).inc()

        if not issues:
            return

        for issue in issues:
            metrics.validation_issues_total.labels(
                object_type=self.object_type,
                error_kind=issue.error_kind,
                field_name=issue.field_name,
            ).inc()

        self.issues.extend(issues)
        outcome.issues.extend(issues)
        self._persist_issues(issues)

    def _persist_issues(self, issues: List[ValidationIssue]) -> None:
        try:
            self.store.save_issues(self.job.id, issues)
        except PersistenceError as e:
            metrics.persistence_failures_total.labels(operation="issues").inc()
            logger.warning(
                f"Failed to persist {len(issues)} issues for job {self.job.id}: {e}",
                extra={"job_id": self.job.id},
                exc_info=True,
            )

    def _checkpoint(self) -> None:
        try:
            self.store.save_checkpoint(self.job)
        except PersistenceError as e:
            metrics.persistence_failures_total.labels(operation="checkpoint").inc()
            logger.warning(
                f"Failed to checkpoint job {self.job.id}: {e}",
                extra={"job_id": self.job.id, "processed_records": self.job.processed_records},
                exc_info=True,
            )
            return

        logger.debug(
            f"Checkpoint at {self.job.processed_records}/{self.job.total_records} records",
            extra={"job_id": self.job.id, **self._counters()},
        )

    def _pause(self) -> None:
        self._transition(JobStatus.PAUSED)
        self._checkpoint()

    def _transition(self, status: JobStatus) -> None:
        if not self.job.can_transition_to(status):
            raise JobStateError(
                f"Cannot move job {self.job.id} from {self.job.status.value} to {status.value}"
            )

        previous = self.job.status
        self.job.status = status
        if status.is_terminal:
            self.job.completed_at = datetime.now(timezone.utc)

        try:
            self.store.update_status(self.job)
        except PersistenceError as e:
            raise self._abort(e) from e

        logger.info(
            f"Job {self.job.id}: {previous.value} -> {status.value}",
            extra={"job_id": self.job.id, "status": status.value},
        )

    def _abort(self, error: Exception) -> JobFailure:
        """Mark the job failed and build the JobFailure to raise."""
        message = str(error) or type(error).__name__
        logger.error(
            f"Job {self.job.id} failed: {message}",
            extra={"job_id": self.job.id, **self._counters()},
            exc_info=error,
        )

        if self.job.status != JobStatus.FAILED:
            # Set directly: the status write that failed may have been a terminal one
            self.job.status = JobStatus.FAILED
            self.job.error_message = message
            self.job.completed_at = datetime.now(timezone.utc)
            metrics.jobs_finished_total.labels(object_type=self.object_type, status="failed").inc()
            try:
                self.store.update_status(self.job)
            except PersistenceError as e:
                logger.warning(f"Failed to record failure of job {self.job.id}: {e}", extra={"job_id": self.job.id})

        self._pending.clear()
        self._backlog.clear()
        return JobFailure(self.job.id, message)

    def _counters(self) -> Dict[str, int]:
        return {
            "total_records": self.job.total_records,
            "processed_records": self.job.processed_records,
            "validated_records": self.job.validated_records,
            "error_count": self.job.error_count,
            "duplicate_records": self.job.duplicate_records,
        }
