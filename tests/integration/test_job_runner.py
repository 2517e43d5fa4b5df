"""
Integration tests for the cleansing job runner.

Runs the rule engine, deduplication tracker, scorer and job store together
through the job lifecycle.
"""

import pytest

from crm_quality.batch import CleansingJobRunner, RunnerSettings
from crm_quality.core.dedup import DeduplicationTracker
from crm_quality.core.errors import JobFailure, JobStateError, PersistenceError
from crm_quality.core.models import JobStatus
from crm_quality.core.rules import RuleEngine
from crm_quality.observability.metrics import REGISTRY


def make_runner(store, settings=None, **kwargs) -> CleansingJobRunner:
    return CleansingJobRunner(
        RuleEngine.for_object_type("contacts"),
        store=store,
        object_type="contacts",
        job_id=kwargs.pop("job_id", "job_test"),
        settings=settings or RunnerSettings(checkpoint_interval=2, batch_size=3),
        **kwargs,
    )


class RecordAllowance:
    """should_continue() callable allowing a fixed number of records"""

    def __init__(self, records: int):
        self.records = records

    def __call__(self) -> bool:
        if self.records <= 0:
            return False
        self.records -= 1
        return True


def sample(name: str, labels: dict) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


@pytest.mark.integration
class TestJobLifecycle:
    """Tests for a complete job over several batches"""

    def test_run_contact_job(self, job_store, contact_records):
        """Test counters, metrics and status of a job split into two batches"""
        runner = make_runner(job_store)

        summary = runner.run(contact_records)

        job = summary.job
        assert job.status == JobStatus.COMPLETED_WITH_ERRORS
        assert job.total_records == 5
        assert job.processed_records == 5
        assert job.validated_records == 2
        assert job.error_count == 3
        assert job.duplicate_records == 1
        assert job.completed_at is not None

        assert summary.metrics.accuracy == 40.0
        assert summary.metrics.completeness == 40.0
        assert summary.metrics.uniqueness == 80.0
        assert summary.metrics.consistency == 40.0
        assert summary.metrics.overall == 50.0
        assert summary.error_records == [1, 2, 3]

        assert job_store.status_history["job_test"] == ["initializing", "processing", "completed_with_errors"]
        assert job_store.get_job("job_test").status == JobStatus.COMPLETED_WITH_ERRORS

    def test_issues_for_duplicate_record(self, job_store, contact_records):
        runner = make_runner(job_store)
        summary = runner.run(contact_records)

        kinds = sorted(i.error_kind for i in summary.issues if i.record_index == 2)

        assert kinds == ["duplicate", "format", "unique"]
        assert job_store.get_issues("job_test") == sorted(summary.issues, key=lambda i: i.record_index)

    def test_clean_job_completes(self, job_store):
        runner = make_runner(job_store)

        summary = runner.run([
            {"email": "ada@example.com", "firstName": "Ada", "lastName": "Lovelace"},
            {"email": "grace@example.com", "firstName": "Grace", "lastName": "Hopper"},
        ])

        assert summary.job.status == JobStatus.COMPLETED
        assert summary.metrics.overall == 100.0
        assert summary.issues == []

    def test_empty_job(self, job_store):
        """Test finishing a job without records scores zero"""
        summary = make_runner(job_store).finish()

        assert summary.job.status == JobStatus.COMPLETED
        assert summary.metrics.overall == 0.0

    def test_checkpoints(self, job_store, contact_records):
        """Test checkpoints every N records and on the last record of each batch"""
        make_runner(job_store).run(contact_records)

        checkpoints = job_store.checkpoints["job_test"]

        assert [c.processed_records for c in checkpoints] == [2, 3, 4, 5]
        assert all(c.validated_records + c.error_count == c.processed_records for c in checkpoints)

    def test_checkpoints_report_whole_job_total(self, job_store, contact_records):
        """Test run() counts every queued record in total_records before the first batch"""
        records = contact_records + [{"email": "edsger@example.com", "firstName": "Edsger", "lastName": "Dijkstra"}]
        runner = make_runner(job_store, RunnerSettings(checkpoint_interval=1, batch_size=2))

        runner.run(records)

        progress = [(c.processed_records, c.total_records) for c in job_store.checkpoints["job_test"]]
        assert progress == [(1, 6), (2, 6), (3, 6), (4, 6), (5, 6), (6, 6)]

    def test_counters_consistent_at_every_checkpoint(self, job_store):
        records = [
            {"email": f"user{i % 7}@example.com", "firstName": "U", "lastName": "" if i % 3 else "X"}
            for i in range(40)
        ]
        make_runner(job_store, RunnerSettings(checkpoint_interval=5, batch_size=9)).run(records)

        for checkpoint in job_store.checkpoints["job_test"]:
            assert checkpoint.is_consistent

    def test_finish_twice(self, job_store):
        runner = make_runner(job_store)
        runner.finish()

        with pytest.raises(JobStateError):
            runner.finish()
        with pytest.raises(JobStateError):
            runner.process_batch([{"email": "a@b.com"}])

    def test_metrics_recorded(self, job_store, contact_records):
        before = sample("crm_quality_duplicates_detected_total", {"object_type": "contacts"})

        summary = make_runner(job_store).run(contact_records)

        after = sample("crm_quality_duplicates_detected_total", {"object_type": "contacts"})
        assert after - before == 1
        assert sample("crm_quality_overall_quality_score", {"object_type": "contacts"}) == summary.metrics.overall


@pytest.mark.integration
class TestBatchBoundaries:
    """Tests for state kept or reset between batches"""

    def test_duplicates_tracked_across_batches(self, job_store):
        """Test the dedup index spans batches while the unique rule restarts"""
        runner = make_runner(job_store)

        first = runner.process_batch([{"email": "A@B.com", "firstName": "Ada", "lastName": "Byron"}])
        second = runner.process_batch([{"email": "a@b.com", "firstName": "Ada", "lastName": "King"}])

        assert first.issues == []
        [issue] = second.issues
        assert issue.error_kind == "duplicate"
        assert issue.record_index == 1
        assert issue.message == "Duplicate email found"
        assert runner.job.duplicate_records == 1

    def test_record_indexes_are_job_global(self, job_store):
        runner = make_runner(job_store)
        runner.process_batch([{"email": "a@b.com", "firstName": "A", "lastName": "B"}])
        outcome = runner.process_batch([{"firstName": "C"}, {"firstName": "D"}])

        assert sorted({i.record_index for i in outcome.issues}) == [1, 2]
        assert runner.job.total_records == 3

    def test_dedup_sees_transformed_values(self, job_store):
        """Test duplicate detection runs on transformed records"""
        runner = CleansingJobRunner(
            RuleEngine([], transforms={"email": str.strip}),
            store=job_store,
            tracker=DeduplicationTracker(["email"]),
        )

        summary = runner.run([{"email": "ada@example.com"}, {"email": "  ADA@example.com "}])

        assert summary.job.duplicate_records == 1


@pytest.mark.integration
class TestPauseResume:
    """Tests for cooperative pausing between records"""

    def test_pause_and_resume_batch(self, job_store, contact_records):
        allowance = RecordAllowance(2)
        runner = make_runner(job_store, should_continue=allowance)

        outcome = runner.process_batch(contact_records)

        assert outcome.paused is True
        assert outcome.processed == 2
        assert runner.job.status == JobStatus.PAUSED
        assert job_store.get_job("job_test").processed_records == 2

        with pytest.raises(JobStateError):
            runner.finish()
        with pytest.raises(JobStateError):
            runner.process_batch([])

        allowance.records = 100
        resumed = runner.resume()

        assert resumed.paused is False
        assert resumed.processed == 3
        summary = runner.finish()

        uninterrupted = make_runner(type(job_store)()).run(contact_records, batch_size=10)
        assert summary.issues == uninterrupted.issues
        assert summary.metrics == uninterrupted.metrics
        assert job_store.status_history["job_test"] == [
            "initializing", "processing", "paused", "processing", "completed_with_errors",
        ]

    def test_finish_refuses_queued_batches(self, job_store, contact_records):
        """Test resume() then finish() cannot complete a job with batches left in run()'s queue"""
        records = contact_records + [{"email": "edsger@example.com", "firstName": "Edsger", "lastName": "Dijkstra"}]
        allowance = RecordAllowance(2)
        runner = make_runner(job_store, should_continue=allowance)

        assert runner.run(records, batch_size=2) is None
        allowance.records = 100
        runner.resume()

        with pytest.raises(JobStateError, match="queued batches"):
            runner.finish()
        assert runner.job.status == JobStatus.PROCESSING

        summary = runner.run()

        assert summary.job.status == JobStatus.COMPLETED_WITH_ERRORS
        assert summary.job.processed_records == 6
        assert summary.job.total_records == 6
        assert summary.job.validated_records == 3

    def test_resume_requires_pause(self, job_store):
        with pytest.raises(JobStateError, match="not paused"):
            make_runner(job_store).resume()

    def test_run_pauses_and_continues(self, job_store, contact_records):
        """Test run() returns None on pause and picks up the backlog when called again"""
        allowance = RecordAllowance(3)
        runner = make_runner(job_store, should_continue=allowance)

        assert runner.run(contact_records, batch_size=2) is None
        assert runner.job.processed_records == 3

        allowance.records = 100
        summary = runner.run()

        assert summary.job.processed_records == 5
        assert summary.job.total_records == 5
        assert summary.job.error_count == 3


@pytest.mark.integration
class TestPersistenceFailures:
    """Tests for fail-open telemetry writes and fail-closed status writes"""

    def test_checkpoint_and_issue_failures_do_not_stop_job(self, flaky_store, contact_records):
        flaky_store.fail_checkpoints = True
        flaky_store.fail_issues = True
        before = sample("crm_quality_persistence_failures_total", {"operation": "checkpoint"})

        summary = make_runner(flaky_store).run(contact_records)

        assert summary.job.status == JobStatus.COMPLETED_WITH_ERRORS
        assert summary.job.processed_records == 5
        assert len(summary.issues) > 0
        assert flaky_store.checkpoints["job_test"] == []
        assert flaky_store.issues["job_test"] == []
        assert sample("crm_quality_persistence_failures_total", {"operation": "checkpoint"}) - before == 4

    def test_status_failure_fails_job(self, flaky_store, contact_records):
        flaky_store.fail_status = True
        runner = make_runner(flaky_store)

        with pytest.raises(JobFailure) as exc_info:
            runner.process_batch(contact_records)

        assert isinstance(exc_info.value.__cause__, PersistenceError)
        assert runner.job.status == JobStatus.FAILED
        assert runner.job.error_message == "status update rejected"
        assert runner.job.processed_records == 0

    def test_terminal_status_failure_fails_job(self, flaky_store, contact_records):
        runner = make_runner(flaky_store)
        runner.process_batch(contact_records)
        flaky_store.fail_status = True

        with pytest.raises(JobFailure):
            runner.finish()

        assert runner.job.status == JobStatus.FAILED

    def test_create_failure_never_starts(self, flaky_store):
        flaky_store.fail_create = True
        runner = make_runner(flaky_store)

        with pytest.raises(JobFailure, match="database unavailable"):
            runner.start()

        assert runner.job.status == JobStatus.FAILED
        with pytest.raises(JobStateError):
            runner.process_batch([{"email": "a@b.com"}])


@pytest.mark.integration
class TestUnexpectedErrors:
    """Tests for errors escaping the processing loop"""

    def test_unexpected_error_fails_job(self, job_store, contact_records):
        class CorruptTracker(DeduplicationTracker):
            def check(self, record, record_index):
                if record_index == 2:
                    raise RuntimeError("dedup index corrupted")
                return super().check(record, record_index)

        runner = make_runner(job_store, tracker=CorruptTracker())

        with pytest.raises(JobFailure, match="dedup index corrupted") as exc_info:
            runner.run(contact_records)

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert exc_info.value.job_id == "job_test"
        assert runner.job.status == JobStatus.FAILED
        assert runner.job.error_message == "dedup index corrupted"
        assert runner.job.processed_records == 2
        assert job_store.get_job("job_test").status == JobStatus.FAILED

    def test_malformed_record_isolated(self, job_store):
        """Test a non-mapping record is evaluated as empty and the batch continues"""
        runner = make_runner(job_store)

        summary = runner.run([None, {"email": "a@b.com", "firstName": "A", "lastName": "B"}])

        assert summary.job.processed_records == 2
        assert summary.job.error_count == 1


@pytest.mark.integration
class TestRunnerFactory:
    """Tests for building runners from the environment"""

    def test_for_object_type_reads_env(self, monkeypatch):
        monkeypatch.setenv("CRM_QUALITY_DEDUP_KEYS", "phone,email")
        monkeypatch.setenv("CRM_QUALITY_CHECKPOINT_INTERVAL", "10")

        runner = CleansingJobRunner.for_object_type("accounts")

        assert runner.tracker.key_fields == ("phone", "email")
        assert runner.settings.checkpoint_interval == 10
        assert runner.job.object_type == "accounts"
        assert runner.job.id.startswith("job_")
