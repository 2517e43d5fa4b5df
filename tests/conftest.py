"""
Pytest configuration and fixtures for crm-quality tests

This module provides shared fixtures for unit, integration, and E2E tests.
"""
import json
import os
from typing import Any, Dict, List

import pytest

from crm_quality.batch import InMemoryJobStore, RunnerSettings
from crm_quality.core.errors import PersistenceError
from crm_quality.core.rules import RuleEngine


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests of single components"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests of the job runner with its collaborators"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests that run the command line interface"
    )


# =======================
# RECORD FIXTURES
# =======================

@pytest.fixture
def contact_records() -> List[Dict[str, Any]]:
    """
    A small contact export with typical migration problems

    Record 0: clean
    Record 1: missing last name
    Record 2: same email as record 0 (different case), bad phone
    Record 3: malformed email
    Record 4: clean
    """
    return [
        {"email": "ada@example.com", "firstName": "Ada", "lastName": "Lovelace", "phone": "555-123-4567"},
        {"email": "grace@example.com", "firstName": "Grace", "lastName": "", "phone": "(555) 987 6543"},
        {"email": "ADA@example.com", "firstName": "Ada", "lastName": "King", "phone": "555-CALL-ADA"},
        {"email": "alan.example.com", "firstName": "Alan", "lastName": "Turing", "phone": None},
        {"email": "linus@example.com", "firstName": "Linus", "lastName": "Torvalds"},
    ]


@pytest.fixture
def contact_engine() -> RuleEngine:
    return RuleEngine.for_object_type("contacts")


@pytest.fixture
def job_store() -> InMemoryJobStore:
    return InMemoryJobStore()


@pytest.fixture
def small_checkpoint_settings() -> RunnerSettings:
    return RunnerSettings(checkpoint_interval=2, batch_size=3)


class FlakyJobStore(InMemoryJobStore):
    """
    In-memory store whose writes can be made to fail per operation

    Set fail_checkpoints / fail_issues / fail_status / fail_create to True
    to make the corresponding write raise PersistenceError.
    """

    def __init__(self):
        super().__init__()
        self.fail_create = False
        self.fail_checkpoints = False
        self.fail_issues = False
        self.fail_status = False

    def create_job(self, job):
        if self.fail_create:
            raise PersistenceError("database unavailable")
        super().create_job(job)

    def save_checkpoint(self, job):
        if self.fail_checkpoints:
            raise PersistenceError("checkpoint write timed out")
        super().save_checkpoint(job)

    def save_issues(self, job_id, issues):
        if self.fail_issues:
            raise PersistenceError("issue log unavailable")
        super().save_issues(job_id, issues)

    def update_status(self, job):
        if self.fail_status:
            raise PersistenceError("status update rejected")
        super().update_status(job)


@pytest.fixture
def flaky_store() -> FlakyJobStore:
    return FlakyJobStore()


# =======================
# FILE FIXTURES
# =======================

@pytest.fixture
def write_json(tmp_path):
    """
    Write a JSON document into tmp_path and return its path

    Usage:
        path = write_json("contacts.json", [{"email": "a@b.com"}])
    """
    def _write(name: str, payload: Any) -> str:
        path = tmp_path / name
        path.write_text(json.dumps(payload), encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture(autouse=True)
def clean_runner_env(monkeypatch):
    """Keep runner settings independent of the developer's environment"""
    for name in list(os.environ):
        if name.startswith("CRM_QUALITY_"):
            monkeypatch.delenv(name, raising=False)
