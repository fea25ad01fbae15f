"""
Job store: the keyed collection of published jobs and their applicants.

Every mutating operation takes the caller identity and the current time
as explicit arguments. All checks run before anything is changed, so a
failing call leaves the stored jobs exactly as they were.
"""

import functools
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from .database import Applicant, Job, get_engine, get_session, init_database
from .errors import (
    AlreadyApplied,
    JobBoardError,
    NotApplied,
    NotFound,
    NotPublisher,
    StorageError,
    ValidationError,
)
from .logger import StructuredLogger, get_logger
from .schema import (
    OPTIONAL_JOB_FIELDS,
    UPDATABLE_JOB_FIELDS,
    validate_applicant_payload,
    validate_job_payload,
    validate_job_update,
)

SEARCH_FIELDS = ["position", "skill", "company_name", "location", "description"]


def _new_job_id() -> str:
    return str(uuid.uuid4())


def tracked(method: Callable) -> Callable:
    """
    Record metrics for a store operation and translate database errors.

    SQLAlchemy errors roll the session back and surface as StorageError.
    """
    operation = method.__name__

    @functools.wraps(method)
    def wrapper(self: "JobStore", *args, **kwargs):
        try:
            result = method(self, *args, **kwargs)
        except SQLAlchemyError as e:
            self.session.rollback()
            error = StorageError(f"Error accessing job storage: {e}")
            self._record_failure(operation, error)
            raise error from e
        except JobBoardError as e:
            self._record_failure(operation, e)
            raise
        self.logger.record_success(operation)
        return result

    return wrapper


class JobStore:
    """Persisted collection of jobs keyed by id, in publish order."""

    def __init__(
        self,
        session,
        clock: Callable[[], datetime] = datetime.now,
        id_factory: Callable[[], str] = _new_job_id,
        logger: Optional[StructuredLogger] = None,
        engine=None,
    ):
        """
        Args:
            session: SQLAlchemy session owned by this store
            clock: Source of the current time when a call omits ``now``
            id_factory: Generator of new job ids
            logger: Logger for operations (default: global logger)
            engine: Engine behind the session, disposed on close
        """
        self.session = session
        self.clock = clock
        self.id_factory = id_factory
        self.logger = logger or get_logger()
        self.engine = engine

    @classmethod
    def open(cls, db_path: Path, **kwargs) -> "JobStore":
        """Create the database if needed and return a store bound to it."""
        init_database(db_path)
        engine = get_engine(db_path)
        return cls(get_session(db_path, engine=engine), engine=engine, **kwargs)

    def close(self) -> None:
        self.session.close()
        if self.engine is not None:
            self.engine.dispose()

    # Helpers

    def _now(self, now: Optional[datetime]) -> datetime:
        return now if now is not None else self.clock()

    def _record_failure(self, operation: str, error: JobBoardError) -> None:
        self.logger.warning(
            f"{operation} failed: {error}",
            error_type=type(error).__name__,
        )
        self.logger.record_failure(operation, type(error).__name__)

    def _load(self, job_id: str, missing_message: str) -> Job:
        job = self.session.get(Job, job_id)
        if job is None:
            raise NotFound(missing_message)
        return job

    def _fresh_id(self) -> str:
        job_id = self.id_factory()
        while self.session.get(Job, job_id) is not None:
            job_id = self.id_factory()
        return job_id

    def _next_seq(self) -> int:
        current = self.session.query(func.max(Job.seq)).scalar()
        return (current or 0) + 1

    def _ordered(self):
        return self.session.query(Job).order_by(Job.seq)

    # Queries

    @tracked
    def get_total_jobs(self) -> List[Dict[str, Any]]:
        return [job.to_dict() for job in self._ordered()]

    @tracked
    def get_my_publish_jobs(self, caller: str) -> List[Dict[str, Any]]:
        jobs = self._ordered().filter(Job.publisher == caller)
        return [job.to_dict() for job in jobs]

    @tracked
    def get_my_apply_jobs(self, caller: str) -> List[Dict[str, Any]]:
        jobs = self._ordered().filter(Job.applicants.any(Applicant.owner == caller))
        return [job.to_dict() for job in jobs]

    @tracked
    def search_jobs(self, keyword: str) -> List[Dict[str, Any]]:
        """Jobs where keyword is a case-insensitive substring of any searchable field."""
        needle = keyword.lower()
        return [
            job.to_dict()
            for job in self._ordered()
            if any(needle in (getattr(job, f) or "").lower() for f in SEARCH_FIELDS)
        ]

    @tracked
    def get_job(self, job_id: str) -> Dict[str, Any]:
        job = self._load(job_id, f"The Job with id={job_id} not found in the job storage")
        return job.to_dict()

    # Mutations

    @tracked
    def publish_job(
        self,
        payload: Dict[str, Any],
        caller: str,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        errors = validate_job_payload(payload)
        if errors:
            raise ValidationError(f"Invalid job payload: {'; '.join(errors)}", errors)

        job = Job(
            id=self._fresh_id(),
            seq=self._next_seq(),
            publisher=caller,
            position=payload["position"],
            email=payload["email"],
            created_at=self._now(now),
            updated_at=None,
        )
        for f in OPTIONAL_JOB_FIELDS:
            setattr(job, f, payload.get(f, ""))

        self.session.add(job)
        self.session.commit()
        self.logger.info("Job published", job_id=job.id, caller=caller)
        return job.to_dict()

    @tracked
    def apply_job(
        self,
        job_id: str,
        payload: Dict[str, Any],
        caller: str,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        job = self._load(job_id, f"couldn't apply the job with id={job_id}. Job not found")

        errors = validate_applicant_payload(payload)
        if errors:
            raise ValidationError(f"Invalid applicant payload: {'; '.join(errors)}", errors)

        if any(a.owner == caller for a in job.applicants):
            raise AlreadyApplied(f"You have already applied the job with id={job_id}.")

        now = self._now(now)
        job.applicants.append(
            Applicant(
                owner=caller,
                name=payload["name"],
                email=payload["email"],
                apply_at=now,
            )
        )
        job.updated_at = now
        self.session.commit()
        self.logger.info("Applied to job", job_id=job_id, caller=caller)
        return job.to_dict()

    @tracked
    def cancel_applied_job(
        self,
        job_id: str,
        caller: str,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        job = self._load(job_id, f"couldn't cancel the application to job with id={job_id}. Job not found")

        applicant = next((a for a in job.applicants if a.owner == caller), None)
        if applicant is None:
            raise NotApplied(f"You have not applied the job with id={job_id}.")

        job.applicants.remove(applicant)
        job.updated_at = self._now(now)
        self.session.commit()
        self.logger.info("Application cancelled", job_id=job_id, caller=caller)
        return job.to_dict()

    @tracked
    def update_job(
        self,
        job_id: str,
        payload: Dict[str, Any],
        caller: str,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        job = self._load(job_id, f"couldn't update the job with id={job_id}. Job not found")

        if job.publisher != caller:
            raise NotPublisher(f"You are not the publisher of the job with id={job_id}.")

        errors = validate_job_update(payload)
        if errors:
            raise ValidationError(f"Invalid job payload: {'; '.join(errors)}", errors)

        for f in UPDATABLE_JOB_FIELDS:
            if f in payload:
                setattr(job, f, payload[f])
        job.updated_at = self._now(now)
        self.session.commit()
        self.logger.info("Job updated", job_id=job_id, caller=caller, fields=sorted(payload))
        return job.to_dict()

    @tracked
    def delete_job(self, job_id: str, caller: str) -> Dict[str, Any]:
        job = self._load(job_id, f"couldn't delete the job with id={job_id}. Job not found.")

        # Ownership is checked before removal so a rejected delete keeps the job.
        if job.publisher != caller:
            raise NotPublisher(f"Only the publisher of the job with id={job_id} can delete it.")

        deleted = job.to_dict()
        self.session.delete(job)
        self.session.commit()
        self.logger.info(f"Job with id={job_id} has been deleted by {caller}", job_id=job_id, caller=caller)
        return deleted
