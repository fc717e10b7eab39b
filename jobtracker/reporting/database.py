"""Database models for report configurations."""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Integer, String, Text, JSON, Index, func
from sqlalchemy.orm import Mapped, mapped_column

from jobtracker.core.database import Base
from jobtracker.reporting.schemas import ReportConfig

# Owner id for built-in templates.
SYSTEM_OWNER = "system"


class ReportConfiguration(Base):
    """
    A saved report definition owned by a user, or a built-in template owned by "system".
    Templates are read-only to everyone but their owner and are never deleted.
    """
    __tablename__ = "report_configurations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    is_template: Mapped[bool] = mapped_column(Boolean, default=False)
    is_public: Mapped[bool] = mapped_column(Boolean, default=False)
    template_category: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    date_range: Mapped[dict] = mapped_column(JSON, nullable=False)
    # {type, start_date, end_date}
    metrics: Mapped[dict] = mapped_column(JSON, nullable=False)
    # {metric_name: bool}
    filters: Mapped[dict] = mapped_column(JSON, nullable=False)
    visualizations: Mapped[dict] = mapped_column(JSON, nullable=False)
    include_ai_insights: Mapped[bool] = mapped_column(Boolean, default=False)
    insights_focus: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    last_generated: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    generation_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("ix_report_configurations_templates", "user_id", "is_template", "is_public"),
    )

    def to_config(self) -> ReportConfig:
        """Rebuild the validated configuration from the stored columns."""
        return ReportConfig(
            name=self.name,
            description=self.description,
            template_category=self.template_category,
            date_range=self.date_range or {},
            metrics=self.metrics or {},
            filters=self.filters or {},
            visualizations=self.visualizations or {},
            include_ai_insights=bool(self.include_ai_insights),
            insights_focus=self.insights_focus or [],
        )

    def apply_config(self, config: ReportConfig) -> None:
        """Copy a validated configuration onto the row's columns."""
        data = config.model_dump(mode="json")
        self.name = data["name"]
        self.description = data["description"]
        self.template_category = data["template_category"]
        self.date_range = data["date_range"]
        self.metrics = data["metrics"]
        self.filters = data["filters"]
        self.visualizations = data["visualizations"]
        self.include_ai_insights = data["include_ai_insights"]
        self.insights_focus = data["insights_focus"]

    def __repr__(self) -> str:
        return f"<ReportConfiguration(id={self.id}, name={self.name!r}, template={self.is_template})>"
