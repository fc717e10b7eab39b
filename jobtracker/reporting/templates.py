"""Built-in report templates, seeded once at start-up under the "system" owner."""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jobtracker.core.models import ChartStyle, DateRangeType, FocusArea
from jobtracker.reporting.database import SYSTEM_OWNER, ReportConfiguration
from jobtracker.reporting.filters import DateRangeConfig, ReportFilters
from jobtracker.reporting.schemas import MetricToggles, ReportConfig, VisualizationConfig

logger = logging.getLogger(__name__)


BUILT_IN_TEMPLATES: List[ReportConfig] = [
    ReportConfig(
        name="Weekly Activity Summary",
        description="What you applied to this week and how it is converting.",
        template_category="activity",
        date_range=DateRangeConfig(type=DateRangeType.LAST_7_DAYS),
        metrics=MetricToggles(
            total_applications=True,
            applications_by_status=True,
            interview_conversion_rate=True,
            offer_conversion_rate=False,
            application_trend=True,
            follow_up_needed=True,
        ),
        include_ai_insights=True,
        insights_focus=[FocusArea.TRENDS, FocusArea.RECOMMENDATIONS],
    ),
    ReportConfig(
        name="Monthly Performance Review",
        description="Conversion rates, response times and ghosting over the last 30 days.",
        template_category="performance",
        date_range=DateRangeConfig(type=DateRangeType.LAST_30_DAYS),
        metrics=MetricToggles(
            total_applications=True,
            applications_by_status=True,
            interview_conversion_rate=True,
            offer_conversion_rate=True,
            average_response_time=True,
            ghosted_applications=True,
            top_companies=True,
        ),
        include_ai_insights=True,
        insights_focus=[FocusArea.STRENGTHS, FocusArea.IMPROVEMENTS, FocusArea.RECOMMENDATIONS],
    ),
    ReportConfig(
        name="Industry Focus Analysis",
        description="Where your applications go and which industries respond.",
        template_category="targeting",
        date_range=DateRangeConfig(type=DateRangeType.LAST_90_DAYS),
        metrics=MetricToggles(
            total_applications=True,
            applications_by_status=False,
            applications_by_industry=True,
            interview_conversion_rate=True,
            offer_conversion_rate=False,
            top_industries=True,
            top_companies=True,
        ),
        visualizations=VisualizationConfig(industry_chart=ChartStyle.PIE),
        include_ai_insights=True,
        insights_focus=[FocusArea.PATTERNS, FocusArea.TRENDS],
    ),
    ReportConfig(
        name="Interview Pipeline",
        description="Interview volume and conversion for the current year.",
        template_category="interviews",
        date_range=DateRangeConfig(type=DateRangeType.THIS_YEAR),
        metrics=MetricToggles(
            total_applications=True,
            interview_conversion_rate=True,
            offer_conversion_rate=True,
            interview_trend=True,
            status_distribution=True,
        ),
        filters=ReportFilters(exclude_ghosted=True),
        include_ai_insights=False,
        insights_focus=[],
    ),
]


async def seed_templates(session: AsyncSession) -> int:
    """
    Insert any built-in template not already present (matched by name).

    Returns:
        Number of templates created
    """
    result = await session.execute(
        select(ReportConfiguration.name).where(
            ReportConfiguration.user_id == SYSTEM_OWNER,
            ReportConfiguration.is_template.is_(True),
        )
    )
    existing = set(result.scalars().all())

    created = 0
    for template in BUILT_IN_TEMPLATES:
        if template.name in existing:
            continue
        row = ReportConfiguration(user_id=SYSTEM_OWNER, is_template=True, is_public=True, generation_count=0)
        row.apply_config(template)
        session.add(row)
        created += 1

    if created:
        await session.commit()
        logger.info(f"Seeded {created} report templates")
    return created
