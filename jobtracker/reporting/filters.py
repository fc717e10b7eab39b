"""Filtering logic for reports."""

from datetime import datetime, timedelta
from typing import Optional, List
from pydantic import BaseModel, Field, model_validator
from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from jobtracker.core.models import DateRangeType
from jobtracker.core.utils import utcnow
from jobtracker.jobs.database import JobModel


class DateRangeConfig(BaseModel):
    """Date-range selector stored on a report configuration."""

    type: DateRangeType = Field(DateRangeType.LAST_30_DAYS, description="Named window or 'custom'")
    start_date: Optional[datetime] = Field(None, description="Required when type is 'custom'")
    end_date: Optional[datetime] = Field(None, description="Defaults to now for 'custom'")

    @model_validator(mode="after")
    def validate_custom_bounds(self):
        if self.type == DateRangeType.CUSTOM:
            if self.start_date is None:
                raise ValueError("start_date is required when date_range.type is 'custom'")
            if self.end_date is not None and self.end_date < self.start_date:
                raise ValueError("end_date must be >= start_date")
        return self


class DateBounds(BaseModel):
    """Resolved [start, end] window; a missing start means 'from the beginning'."""

    start_date: Optional[datetime] = None
    end_date: datetime

    @property
    def span_days(self) -> int:
        """Length of the window in whole days; open-ended windows count as a year."""
        if self.start_date is None:
            return 365
        return (self.end_date - self.start_date).days


class ReportFilters(BaseModel):
    """Filters for report generation."""

    companies: List[str] = Field(default_factory=list, description="Company allow-list")
    industries: List[str] = Field(default_factory=list, description="Industry allow-list")
    roles: List[str] = Field(default_factory=list, description="Case-insensitive title fragments (any match)")
    statuses: List[str] = Field(default_factory=list, description="Status allow-list")
    locations: List[str] = Field(default_factory=list, description="Location allow-list")
    exclude_archived: bool = Field(True, description="Skip archived jobs")
    exclude_ghosted: bool = Field(False, description="Skip jobs marked as ghosted")


def resolve_date_range(date_range: DateRangeConfig, now: Optional[datetime] = None) -> DateBounds:
    """
    Turn a date-range selector into concrete bounds.

    Args:
        date_range: Selector from the report configuration
        now: Reference time (defaults to current UTC time)

    Returns:
        DateBounds with start_date None for 'allTime'
    """
    now = now or utcnow()
    range_type = date_range.type

    if range_type == DateRangeType.LAST_7_DAYS:
        return DateBounds(start_date=now - timedelta(days=7), end_date=now)
    if range_type == DateRangeType.LAST_30_DAYS:
        return DateBounds(start_date=now - timedelta(days=30), end_date=now)
    if range_type == DateRangeType.LAST_90_DAYS:
        return DateBounds(start_date=now - timedelta(days=90), end_date=now)
    if range_type == DateRangeType.THIS_MONTH:
        start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        return DateBounds(start_date=start, end_date=now)
    if range_type == DateRangeType.LAST_MONTH:
        first_of_this_month = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        end = first_of_this_month - timedelta(microseconds=1)
        start = end.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        return DateBounds(start_date=start, end_date=end)
    if range_type == DateRangeType.THIS_YEAR:
        start = now.replace(month=1, day=1, hour=0, minute=0, second=0, microsecond=0)
        return DateBounds(start_date=start, end_date=now)
    if range_type == DateRangeType.CUSTOM:
        return DateBounds(start_date=date_range.start_date, end_date=date_range.end_date or now)

    # allTime
    return DateBounds(start_date=None, end_date=now)


def build_job_query(user_id: str, filters: ReportFilters, bounds: DateBounds):
    """Build the SELECT for a user's jobs matching filters and window."""
    query = select(JobModel).where(JobModel.user_id == user_id)

    # Date window
    if bounds.start_date is not None:
        query = query.where(JobModel.created_at >= bounds.start_date)
    query = query.where(JobModel.created_at <= bounds.end_date)

    if filters.companies:
        query = query.where(JobModel.company.in_(filters.companies))
    if filters.industries:
        query = query.where(JobModel.industry.in_(filters.industries))
    if filters.roles:
        query = query.where(or_(*[JobModel.title.ilike(f"%{role}%") for role in filters.roles]))
    if filters.statuses:
        query = query.where(JobModel.status.in_(filters.statuses))
    if filters.locations:
        query = query.where(JobModel.location.in_(filters.locations))

    # Flags are nullable in legacy rows, so compare with IS NOT TRUE semantics
    if filters.exclude_archived:
        query = query.where(or_(JobModel.is_archived.is_(None), JobModel.is_archived.is_(False)))
    if filters.exclude_ghosted:
        query = query.where(or_(JobModel.is_ghosted.is_(None), JobModel.is_ghosted.is_(False)))

    return query.order_by(JobModel.created_at.desc(), JobModel.id.desc())


async def apply_filters(
    session: AsyncSession,
    user_id: str,
    filters: ReportFilters,
    bounds: DateBounds,
) -> List[JobModel]:
    """
    Apply filters to the job query and return results.

    Args:
        session: Async database session
        user_id: Owner of the job records
        filters: ReportFilters object
        bounds: Resolved date window

    Returns:
        List of JobModel objects, newest first
    """
    result = await session.execute(build_job_query(user_id, filters, bounds))
    return list(result.scalars().all())
