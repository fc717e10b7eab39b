"""Public service interface for the Reporting module."""
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from sqlalchemy import and_, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from jobtracker.core.models import ExportFormat
from jobtracker.core.utils import utcnow
from jobtracker.reporting.aggregation import MetricAggregator, SqlMetricAggregator
from jobtracker.reporting.database import ReportConfiguration
from jobtracker.reporting.generators import get_generator
from jobtracker.reporting.insights import InsightOrchestrator
from jobtracker.reporting.schemas import ReportConfig, ReportConfigUpdate, ReportData

logger = logging.getLogger(__name__)


class ReportNotFoundError(LookupError):
    """Configuration does not exist or is not visible to the caller."""


class ReportValidationError(ValueError):
    """Request is missing required input; raised before any aggregation."""


class ReportRenderError(RuntimeError):
    """A renderer failed; no artifact is returned."""


@dataclass
class ExportedReport:
    content: bytes
    filename: str
    media_type: str


def _visible_to(user_id: str):
    """Own configurations plus public templates."""
    return or_(
        ReportConfiguration.user_id == user_id,
        and_(ReportConfiguration.is_template.is_(True), ReportConfiguration.is_public.is_(True)),
    )


class ReportService:
    """Report configuration CRUD, generation and export."""

    def __init__(
        self,
        aggregator: Optional[MetricAggregator] = None,
        insights: Optional[InsightOrchestrator] = None,
        clock=utcnow,
    ):
        self.aggregator = aggregator or SqlMetricAggregator(clock=clock)
        self.insights = insights
        self.clock = clock

    # ──── Configurations ────

    async def create_config(self, session: AsyncSession, user_id: str, config: ReportConfig) -> ReportConfiguration:
        row = ReportConfiguration(user_id=user_id, is_template=False, is_public=False, generation_count=0)
        row.apply_config(config)
        session.add(row)
        await session.commit()
        await session.refresh(row)
        logger.info(f"Created report configuration {row.id} for user {user_id}")
        return row

    async def list_configs(
        self,
        session: AsyncSession,
        user_id: str,
        include_templates: bool = False,
    ) -> Tuple[List[ReportConfiguration], List[ReportConfiguration]]:
        """Return (user's saved reports newest first, public templates by category/name)."""
        result = await session.execute(
            select(ReportConfiguration)
            .where(ReportConfiguration.user_id == user_id, ReportConfiguration.is_template.is_(False))
            .order_by(ReportConfiguration.created_at.desc(), ReportConfiguration.id.desc())
        )
        user_reports = list(result.scalars().all())

        templates: List[ReportConfiguration] = []
        if include_templates:
            result = await session.execute(
                select(ReportConfiguration)
                .where(ReportConfiguration.is_template.is_(True), ReportConfiguration.is_public.is_(True))
                .order_by(ReportConfiguration.template_category, ReportConfiguration.name)
            )
            templates = list(result.scalars().all())

        return user_reports, templates

    async def get_config(self, session: AsyncSession, config_id: int, user_id: str) -> ReportConfiguration:
        result = await session.execute(
            select(ReportConfiguration).where(ReportConfiguration.id == config_id, _visible_to(user_id))
        )
        row = result.scalar_one_or_none()
        if row is None:
            raise ReportNotFoundError("Report configuration not found")
        return row

    async def _get_editable(self, session: AsyncSession, config_id: int, user_id: str) -> ReportConfiguration:
        result = await session.execute(
            select(ReportConfiguration).where(
                ReportConfiguration.id == config_id,
                ReportConfiguration.user_id == user_id,
                ReportConfiguration.is_template.is_(False),
            )
        )
        row = result.scalar_one_or_none()
        if row is None:
            raise ReportNotFoundError("Report configuration not found")
        return row

    async def update_config(
        self,
        session: AsyncSession,
        config_id: int,
        user_id: str,
        changes: ReportConfigUpdate,
    ) -> ReportConfiguration:
        """Apply a partial update to one of the user's own, non-template configurations."""
        row = await self._get_editable(session, config_id, user_id)
        merged = row.to_config().model_dump()
        merged.update(changes.model_dump(exclude_unset=True))
        try:
            config = ReportConfig.model_validate(merged)
        except ValueError as e:
            raise ReportValidationError(str(e)) from e
        row.apply_config(config)
        await session.commit()
        await session.refresh(row)
        return row

    async def delete_config(self, session: AsyncSession, config_id: int, user_id: str) -> None:
        row = await self._get_editable(session, config_id, user_id)
        await session.delete(row)
        await session.commit()
        logger.info(f"Deleted report configuration {config_id} for user {user_id}")

    # ──── Generation ────

    async def build_report_data(self, session: AsyncSession, user_id: str, config: ReportConfig) -> ReportData:
        """Aggregate, then attach insights when the configuration asks for them."""
        report_data = await self.aggregator.aggregate(session, user_id, config)
        if config.include_ai_insights:
            if self.insights is None:
                logger.warning("AI insights requested but no insight orchestrator is configured")
                report_data.ai_insights = []
            else:
                report_data.ai_insights = await self.insights.generate_insights(report_data, config)
        return report_data

    async def generate(
        self,
        session: AsyncSession,
        user_id: str,
        config_id: Optional[int] = None,
        ad_hoc: Optional[ReportConfig] = None,
    ) -> Tuple[ReportData, Optional[ReportConfiguration]]:
        """
        Generate report data from a saved configuration or an ad-hoc one.

        Saved configurations get their generation metadata bumped atomically.
        """
        if config_id is None and ad_hoc is None:
            raise ReportValidationError("Either config_id or ad_hoc_config must be provided")

        row: Optional[ReportConfiguration] = None
        if config_id is not None:
            row = await self.get_config(session, config_id, user_id)
            await session.execute(
                update(ReportConfiguration)
                .where(ReportConfiguration.id == row.id)
                .values(
                    generation_count=ReportConfiguration.generation_count + 1,
                    last_generated=self.clock(),
                )
            )
            await session.commit()
            await session.refresh(row)
            config = row.to_config()
        else:
            config = ad_hoc

        report_data = await self.build_report_data(session, user_id, config)
        return report_data, row

    async def export(
        self,
        session: AsyncSession,
        user_id: str,
        config_id: int,
        export_format: ExportFormat,
    ) -> ExportedReport:
        """Render a saved configuration to PDF or Excel bytes."""
        row = await self.get_config(session, config_id, user_id)
        config = row.to_config()
        report_data = await self.build_report_data(session, user_id, config)

        generator = get_generator(export_format)
        try:
            content = generator.render(report_data, config)
        except Exception as e:
            logger.exception(f"Failed to render {export_format} for configuration {config_id}")
            raise ReportRenderError(f"Failed to render {ExportFormat(export_format).value} report") from e

        return ExportedReport(
            content=content,
            filename=generator.get_filename(config.name, self.clock()),
            media_type=generator.media_type,
        )
