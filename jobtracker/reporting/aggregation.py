"""
Metric aggregation: job records -> ReportData.

Each metric is computed only when its toggle is on, so absent sections in
ReportData always mean "not requested" rather than "zero".
"""
import logging
from collections import Counter
from datetime import datetime
from typing import Iterable, List, Optional, Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jobtracker.core.models import JOB_STATUSES
from jobtracker.core.utils import utcnow
from jobtracker.jobs.database import ApplicationStatusModel, InterviewModel, JobModel
from jobtracker.reporting.filters import DateBounds, apply_filters, resolve_date_range
from jobtracker.reporting.schemas import (
    CompanyCount,
    ConversionRate,
    IndustryCount,
    JobRow,
    ReportConfig,
    ReportData,
    ResponseTime,
    StatusCount,
    TrendPoint,
)

logger = logging.getLogger(__name__)

TOP_N = 10
PIPELINE_STATUSES = ("Applied", "Interview", "Offer")
INTERVIEW_STATUSES = ("Interview", "Offer")
RESPONSE_STATUSES = ("Phone Screen", "Technical Interview", "Final Interview", "Offer")
# Windows longer than this are bucketed by month instead of by week.
WEEKLY_BUCKET_MAX_DAYS = 90


class MetricAggregator(Protocol):
    async def aggregate(self, session: AsyncSession, user_id: str, config: ReportConfig) -> ReportData:
        ...


def _percentage(count: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return round(count / total * 100, 1)


def _ranked(counter: Counter) -> list:
    """Count-descending, ties broken by name so output is stable."""
    return sorted(counter.items(), key=lambda item: (-item[1], item[0]))


def count_by_status(jobs: List[JobModel]) -> List[StatusCount]:
    counts = Counter(job.status or "Unknown" for job in jobs)
    return [
        StatusCount(status=status, count=count, percentage=_percentage(count, len(jobs)))
        for status, count in _ranked(counts)
    ]


def count_by_industry(jobs: List[JobModel]) -> List[IndustryCount]:
    counts = Counter(job.industry or "Unknown" for job in jobs)
    return [
        IndustryCount(industry=industry, count=count, percentage=_percentage(count, len(jobs)))
        for industry, count in _ranked(counts)
    ]


def count_by_company(jobs: List[JobModel]) -> List[CompanyCount]:
    counts = Counter(job.company or "Unknown" for job in jobs)
    return [CompanyCount(company=company, count=count) for company, count in _ranked(counts)]


def conversion_rate(jobs: List[JobModel], converted_statuses: Iterable[str]) -> ConversionRate:
    converted_statuses = tuple(converted_statuses)
    applied = sum(1 for job in jobs if job.status in PIPELINE_STATUSES)
    converted = sum(1 for job in jobs if job.status in converted_statuses)
    return ConversionRate(
        applied=applied,
        converted=converted,
        rate=_percentage(converted, applied),
    )


def status_distribution(jobs: List[JobModel]) -> List[StatusCount]:
    """Fixed status buckets; jobs with other statuses are not counted in any bucket."""
    counts = Counter((job.status or "Interested") for job in jobs)
    return [
        StatusCount(status=status, count=counts.get(status, 0), percentage=_percentage(counts.get(status, 0), len(jobs)))
        for status in JOB_STATUSES
    ]


def bucket_key(moment: datetime, bounds: DateBounds) -> str:
    """Weekly 'Week N' buckets from the window start, or 'YYYY-MM' for long windows."""
    if bounds.span_days > WEEKLY_BUCKET_MAX_DAYS:
        return f"{moment.year}-{moment.month:02d}"
    origin = bounds.start_date or datetime(moment.year, 1, 1)
    week_number = (moment - origin).days // 7
    return f"Week {week_number + 1}"


def trend(moments: Iterable[Optional[datetime]], bounds: DateBounds) -> List[TrendPoint]:
    """Bucket timestamps inside the window; buckets are returned in chronological order."""
    counts: dict = {}
    for moment in sorted(m for m in moments if m is not None):
        if bounds.start_date is not None and moment < bounds.start_date:
            continue
        if moment > bounds.end_date:
            continue
        key = bucket_key(moment, bounds)
        counts[key] = counts.get(key, 0) + 1
    return [TrendPoint(period=period, count=count) for period, count in counts.items()]


def _job_row(job: JobModel) -> JobRow:
    return JobRow(
        company=job.company,
        title=job.title,
        status=job.status,
        industry=job.industry,
        location=job.location,
        applied_date=job.applied_date,
        source=job.source,
    )


class SqlMetricAggregator:
    """Aggregates a user's job, status and interview tables into ReportData."""

    def __init__(self, clock=utcnow):
        self.clock = clock

    async def aggregate(self, session: AsyncSession, user_id: str, config: ReportConfig) -> ReportData:
        now = self.clock()
        bounds = resolve_date_range(config.date_range, now=now)
        jobs = await apply_filters(session, user_id, config.filters, bounds)
        metrics = config.metrics

        logger.debug("Aggregating %d jobs for user=%s report=%r", len(jobs), user_id, config.name)

        data = ReportData(
            report_name=config.name,
            generated_at=now,
            date_range=bounds,
            total_jobs=len(jobs),
            jobs=[_job_row(job) for job in jobs],
        )

        if metrics.total_applications:
            data.total_applications = sum(1 for job in jobs if job.status != "Interested")
        if metrics.applications_by_status:
            data.applications_by_status = count_by_status(jobs)
        if metrics.applications_by_industry:
            data.applications_by_industry = count_by_industry(jobs)
        if metrics.applications_by_company:
            data.applications_by_company = count_by_company(jobs)
        if metrics.interview_conversion_rate:
            data.interview_conversion_rate = conversion_rate(jobs, INTERVIEW_STATUSES)
        if metrics.offer_conversion_rate:
            data.offer_conversion_rate = conversion_rate(jobs, ("Offer",))
        if metrics.average_response_time:
            data.average_response_time = await self._average_response_time(session, user_id, bounds)
        if metrics.application_trend:
            data.application_trend = trend((job.created_at for job in jobs), bounds)
        if metrics.interview_trend:
            data.interview_trend = await self._interview_trend(session, user_id, bounds)
        if metrics.top_companies:
            data.top_companies = count_by_company(jobs)[:TOP_N]
        if metrics.top_industries:
            data.top_industries = [
                IndustryCount(industry=item.industry, count=item.count)
                for item in count_by_industry(jobs)[:TOP_N]
            ]
        if metrics.status_distribution:
            data.status_distribution = status_distribution(jobs)
        if metrics.ghosted_applications:
            data.ghosted_applications = sum(1 for job in jobs if job.is_ghosted)
        if metrics.follow_up_needed:
            data.follow_up_needed = sum(1 for job in jobs if job.needs_follow_up)

        return data

    async def _average_response_time(self, session: AsyncSession, user_id: str, bounds: DateBounds) -> ResponseTime:
        """Mean days between a response status being recorded and the date it refers to."""
        query = select(ApplicationStatusModel).where(
            ApplicationStatusModel.user_id == user_id,
            ApplicationStatusModel.status.in_(RESPONSE_STATUSES),
            ApplicationStatusModel.status_date <= bounds.end_date,
        )
        if bounds.start_date is not None:
            query = query.where(ApplicationStatusModel.status_date >= bounds.start_date)

        result = await session.execute(query)
        response_days = []
        for status in result.scalars().all():
            if status.status_date is None or status.created_at is None:
                continue
            days = (status.status_date - status.created_at).days
            if days >= 0:
                response_days.append(days)

        if not response_days:
            return ResponseTime(average_days=0.0, count=0)
        return ResponseTime(
            average_days=round(sum(response_days) / len(response_days), 1),
            count=len(response_days),
        )

    async def _interview_trend(self, session: AsyncSession, user_id: str, bounds: DateBounds) -> List[TrendPoint]:
        query = select(InterviewModel.interview_date).where(
            InterviewModel.user_id == user_id,
            InterviewModel.interview_date <= bounds.end_date,
        )
        if bounds.start_date is not None:
            query = query.where(InterviewModel.interview_date >= bounds.start_date)
        result = await session.execute(query)
        return trend(result.scalars().all(), bounds)
