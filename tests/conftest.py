"""
Pytest configuration and shared fixtures.
"""

import itertools
from datetime import datetime, timedelta
from typing import Any, Dict

import pytest

from jobboard.logger import get_logger, reset_logger
from jobboard.store import JobStore


class TickingClock:
    """Clock that advances one second on every call."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        now = self.current
        self.current = self.current + timedelta(seconds=1)
        return now


@pytest.fixture(autouse=True)
def logger(tmp_path):
    """Fresh global logger writing only to a temporary directory."""
    reset_logger()
    log = get_logger(log_dir=tmp_path / "logs", enable_console=False)
    yield log
    reset_logger()


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock(datetime(2024, 1, 1, 9, 0, 0))


@pytest.fixture
def store(tmp_path, clock, logger):
    """Store backed by a temporary SQLite file, with ids J1, J2, ..."""
    counter = itertools.count(1)
    job_store = JobStore.open(
        tmp_path / "jobs.db",
        clock=clock,
        id_factory=lambda: f"J{next(counter)}",
        logger=logger,
    )
    yield job_store
    job_store.close()


@pytest.fixture
def job_payload() -> Dict[str, Any]:
    """Minimal valid job payload."""
    return {"position": "Dev", "email": "a@x.com"}


@pytest.fixture
def full_job_payload() -> Dict[str, Any]:
    """Job payload with every optional field."""
    return {
        "position": "Backend Engineer",
        "email": "jobs@acme.io",
        "skill": "Python, SQL",
        "company_name": "Acme Corp",
        "company_url": "https://acme.io",
        "description": "Build and run our APIs.",
        "salary": "100k-120k",
        "location": "Berlin",
    }


@pytest.fixture
def applicant_payload() -> Dict[str, Any]:
    return {"name": "Bob", "email": "b@x.com"}
