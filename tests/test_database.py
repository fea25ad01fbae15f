"""
Tests for database.py - SQLite database operations.
"""

from datetime import datetime

import pytest
from sqlalchemy.exc import IntegrityError

from jobboard.database import Applicant, Job, get_session, init_database


class TestDatabaseInit:
    """Test database initialization."""

    def test_init_creates_database_file(self, tmp_path):
        """Test that init_database creates the database file."""
        db_path = tmp_path / "test.db"
        assert not db_path.exists()

        init_database(db_path)

        assert db_path.exists()

    def test_init_creates_tables(self, tmp_path):
        """Test that init_database creates the jobs and applicants tables."""
        db_path = tmp_path / "test.db"
        init_database(db_path)

        session = get_session(db_path)
        assert session.query(Job).count() == 0
        assert session.query(Applicant).count() == 0
        session.close()

    def test_init_creates_parent_directories(self, tmp_path):
        """Test that init_database creates parent directories if missing."""
        db_path = tmp_path / "nested" / "dir" / "test.db"
        assert not db_path.parent.exists()

        init_database(db_path)

        assert db_path.exists()


class TestJobModel:
    """Test Job and Applicant models."""

    @pytest.fixture
    def db_session(self, tmp_path):
        """Create a temporary database and return a session."""
        db_path = tmp_path / "test.db"
        init_database(db_path)
        session = get_session(db_path)
        yield session
        session.close()

    @pytest.fixture
    def sample_job(self):
        return Job(
            id="J1",
            seq=1,
            publisher="alice",
            position="Dev",
            email="a@x.com",
            created_at=datetime(2024, 1, 1, 9, 0, 0),
        )

    def test_defaults_for_optional_fields(self, db_session, sample_job):
        """Optional text columns default to empty strings."""
        db_session.add(sample_job)
        db_session.commit()

        job = db_session.get(Job, "J1")
        assert job.skill == ""
        assert job.company_url == ""
        assert job.updated_at is None

    def test_job_without_required_fields_fails(self, db_session):
        """Test that creating a job without required fields fails."""
        db_session.add(Job(id="J2", seq=2))

        with pytest.raises(IntegrityError):
            db_session.commit()

    def test_duplicate_owner_on_same_job_fails(self, db_session, sample_job):
        """One owner can hold only one application per job."""
        now = datetime(2024, 1, 1, 10, 0, 0)
        sample_job.applicants.append(Applicant(owner="bob", name="Bob", email="b@x.com", apply_at=now))
        db_session.add(sample_job)
        db_session.commit()

        db_session.add(Applicant(job_id="J1", owner="bob", name="Bob", email="b@x.com", apply_at=now))
        with pytest.raises(IntegrityError):
            db_session.commit()

    def test_delete_job_removes_applicants(self, db_session, sample_job):
        now = datetime(2024, 1, 1, 10, 0, 0)
        sample_job.applicants.append(Applicant(owner="bob", name="Bob", email="b@x.com", apply_at=now))
        db_session.add(sample_job)
        db_session.commit()

        db_session.delete(db_session.get(Job, "J1"))
        db_session.commit()

        assert db_session.query(Applicant).count() == 0

    def test_to_dict(self, db_session, sample_job):
        now = datetime(2024, 1, 1, 10, 0, 0)
        sample_job.applicants.append(Applicant(owner="bob", name="Bob", email="b@x.com", apply_at=now))
        db_session.add(sample_job)
        db_session.commit()

        data = db_session.get(Job, "J1").to_dict()
        assert data["id"] == "J1"
        assert data["publisher"] == "alice"
        assert data["applicants"] == [
            {"owner": "bob", "name": "Bob", "email": "b@x.com", "apply_at": now}
        ]
