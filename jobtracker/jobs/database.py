"""
Job application records.
Reports only read these tables; they are written by the tracker's CRUD surface.
"""
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Integer, String, Index, func
from sqlalchemy.orm import Mapped, mapped_column

from jobtracker.core.database import Base


class JobModel(Base):
    """One tracked job opportunity per row."""
    __tablename__ = "jobs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    company: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(String(50), default="Interested")
    # Interested | Applied | Interview | Offer | Rejected | Ghosted | Accepted
    industry: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    source: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    applied_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    is_archived: Mapped[bool] = mapped_column(Boolean, default=False)
    is_ghosted: Mapped[bool] = mapped_column(Boolean, default=False)
    needs_follow_up: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), index=True)

    __table_args__ = (
        Index("ix_jobs_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<JobModel(id={self.id}, company={self.company}, status={self.status})>"


class ApplicationStatusModel(Base):
    """Status transitions recorded against a job; status_date is when the employer responded."""
    __tablename__ = "application_statuses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    job_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)  # FK to jobs.id
    status: Mapped[str] = mapped_column(String(50), nullable=False)
    status_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    def __repr__(self) -> str:
        return f"<ApplicationStatusModel(job_id={self.job_id}, status={self.status})>"


class InterviewModel(Base):
    __tablename__ = "interviews"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    job_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    interview_type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    interview_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
