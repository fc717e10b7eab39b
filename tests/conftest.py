"""
Shared pytest fixtures for the Job Tracker reports test suite.
"""
import pytest
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from jobtracker.core.ai_client import GenerationOptions
from jobtracker.core.database import Base
from jobtracker.jobs.database import JobModel, ApplicationStatusModel, InterviewModel
import jobtracker.reporting.database  # noqa: F401
import jobtracker.sharing.database  # noqa: F401

# Frozen "now" used by clocks in tests
NOW = datetime(2024, 6, 15, 12, 0, 0)


class StubTextGenerator:
    """Deterministic TextGenerator: records prompts, returns canned text or raises per keyword."""

    def __init__(self, responses: Optional[Dict[str, object]] = None, default: str = "Stub insight text."):
        self.responses = responses or {}
        self.default = default
        self.calls: List[tuple] = []

    async def generate(self, prompt: str, options: GenerationOptions) -> str:
        self.calls.append((prompt, options))
        for keyword, response in self.responses.items():
            if keyword in prompt:
                if isinstance(response, Exception):
                    raise response
                return response
        return self.default


# --- Database Fixtures ---

@pytest.fixture
async def session_factory():
    """Async in-memory SQLite session factory with every table created."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    yield factory

    await engine.dispose()


@pytest.fixture
async def async_db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def stub_generator():
    return StubTextGenerator()


# --- Mock Data Fixtures ---

@pytest.fixture
def sample_job(async_db_session):
    """Factory fixture for creating job records (created three days before NOW by default)."""
    async def _create_job(
        user_id="alice",
        company="Acme Corp",
        title="Software Engineer",
        status="Applied",
        industry="Technology",
        location="Remote",
        source="LinkedIn",
        applied_date=None,
        is_archived=False,
        is_ghosted=False,
        needs_follow_up=False,
        created_at=None,
    ):
        job = JobModel(
            user_id=user_id,
            company=company,
            title=title,
            status=status,
            industry=industry,
            location=location,
            source=source,
            applied_date=applied_date,
            is_archived=is_archived,
            is_ghosted=is_ghosted,
            needs_follow_up=needs_follow_up,
            created_at=created_at or NOW - timedelta(days=3),
        )
        async_db_session.add(job)
        await async_db_session.commit()
        await async_db_session.refresh(job)
        return job

    return _create_job


@pytest.fixture
def sample_status(async_db_session):
    async def _create_status(job_id, status, status_date, created_at, user_id="alice"):
        record = ApplicationStatusModel(
            user_id=user_id, job_id=job_id, status=status, status_date=status_date, created_at=created_at
        )
        async_db_session.add(record)
        await async_db_session.commit()
        return record

    return _create_status


@pytest.fixture
def sample_interview(async_db_session):
    async def _create_interview(interview_date, job_id=None, interview_type="Phone Screen", user_id="alice"):
        record = InterviewModel(
            user_id=user_id, job_id=job_id, interview_type=interview_type,
            interview_date=interview_date, created_at=interview_date,
        )
        async_db_session.add(record)
        await async_db_session.commit()
        return record

    return _create_interview
