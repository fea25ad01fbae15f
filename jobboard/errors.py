"""
Error types raised by the job store.

Every error carries a human-readable message; callers report ``str(error)``.
"""

from typing import List, Optional


class JobBoardError(Exception):
    """Base class for all job board errors."""
    pass


class NotFound(JobBoardError):
    """No job exists for the requested id."""
    pass


class NotPublisher(JobBoardError):
    """Caller is not the publisher of the job."""
    pass


class AlreadyApplied(JobBoardError):
    """Caller has already applied to the job."""
    pass


class NotApplied(JobBoardError):
    """Caller has not applied to the job."""
    pass


class ValidationError(JobBoardError):
    """Payload failed validation."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors or []


class StorageError(JobBoardError):
    """The underlying database could not be accessed."""
    pass
