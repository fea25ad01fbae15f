"""
Database schema and connection management.

Uses SQLite with SQLAlchemy for job and applicant storage.
"""

from pathlib import Path
from typing import Any, Dict

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker

Base = declarative_base()


class Job(Base):
    """Published job posting."""

    __tablename__ = "jobs"

    id = Column(String, primary_key=True)  # uuid4
    seq = Column(Integer, nullable=False, index=True)  # insertion order
    publisher = Column(String, nullable=False, index=True)
    position = Column(String, nullable=False)
    email = Column(String, nullable=False)
    skill = Column(String, nullable=False, default="")
    company_name = Column(String, nullable=False, default="")
    company_url = Column(String, nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    salary = Column(String, nullable=False, default="")
    location = Column(String, nullable=False, default="")
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=True)

    applicants = relationship(
        "Applicant",
        back_populates="job",
        order_by="Applicant.id",
        cascade="all, delete-orphan",
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "publisher": self.publisher,
            "position": self.position,
            "email": self.email,
            "skill": self.skill,
            "company_name": self.company_name,
            "company_url": self.company_url,
            "description": self.description,
            "salary": self.salary,
            "location": self.location,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "applicants": [a.to_dict() for a in self.applicants],
        }


class Applicant(Base):
    """Application of one caller to one job."""

    __tablename__ = "applicants"
    __table_args__ = (UniqueConstraint("job_id", "owner", name="uq_applicant_job_owner"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    job_id = Column(String, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    owner = Column(String, nullable=False)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    apply_at = Column(DateTime, nullable=False)

    job = relationship("Job", back_populates="applicants")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "owner": self.owner,
            "name": self.name,
            "email": self.email,
            "apply_at": self.apply_at,
        }


def get_engine(db_path: Path):
    """Create an engine for the SQLite database file."""
    return create_engine(f"sqlite:///{db_path}")


def init_database(db_path: Path) -> None:
    """
    Initialize database and create tables.

    Args:
        db_path: Path to SQLite database file
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = get_engine(db_path)
    Base.metadata.create_all(engine)
    engine.dispose()


def get_session(db_path: Path, engine=None):
    """
    Get database session.

    Args:
        db_path: Path to SQLite database file
        engine: Existing engine to bind instead of creating one

    Returns:
        SQLAlchemy session
    """
    if engine is None:
        engine = get_engine(db_path)
    Session = sessionmaker(bind=engine)
    return Session()
