"""Pydantic models for report configurations and aggregated report data."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from jobtracker.core.models import ChartStyle, ColorScheme, FocusArea, resolve_focus_areas
from jobtracker.reporting.filters import DateBounds, DateRangeConfig, ReportFilters


# ──── Configuration ────

class MetricToggles(BaseModel):
    """Which metrics the aggregator computes."""

    total_applications: bool = True
    applications_by_status: bool = True
    applications_by_industry: bool = False
    applications_by_company: bool = False
    interview_conversion_rate: bool = True
    offer_conversion_rate: bool = True
    average_response_time: bool = False
    application_trend: bool = False
    interview_trend: bool = False
    top_companies: bool = False
    top_industries: bool = False
    status_distribution: bool = False
    ghosted_applications: bool = False
    follow_up_needed: bool = False


class VisualizationConfig(BaseModel):
    status_chart: ChartStyle = ChartStyle.PIE
    industry_chart: ChartStyle = ChartStyle.BAR
    company_chart: ChartStyle = ChartStyle.BAR
    trend_chart: ChartStyle = ChartStyle.LINE
    color_scheme: ColorScheme = ColorScheme.DEFAULT


class ReportConfig(BaseModel):
    """A report definition: what to aggregate, how to filter, which insights to ask for."""

    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    template_category: Optional[str] = Field(None, max_length=50)
    date_range: DateRangeConfig = Field(default_factory=DateRangeConfig)
    metrics: MetricToggles = Field(default_factory=MetricToggles)
    filters: ReportFilters = Field(default_factory=ReportFilters)
    visualizations: VisualizationConfig = Field(default_factory=VisualizationConfig)
    include_ai_insights: bool = False
    insights_focus: List[FocusArea] = Field(
        default_factory=lambda: [FocusArea.TRENDS, FocusArea.RECOMMENDATIONS]
    )

    @field_validator("insights_focus", mode="before")
    @classmethod
    def drop_unknown_focus_areas(cls, v):
        if v is None:
            return []
        return resolve_focus_areas(v)


class ReportConfigUpdate(BaseModel):
    """Partial update; only fields present in the request are applied."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    template_category: Optional[str] = Field(None, max_length=50)
    date_range: Optional[DateRangeConfig] = None
    metrics: Optional[MetricToggles] = None
    filters: Optional[ReportFilters] = None
    visualizations: Optional[VisualizationConfig] = None
    include_ai_insights: Optional[bool] = None
    insights_focus: Optional[List[FocusArea]] = None

    @field_validator("insights_focus", mode="before")
    @classmethod
    def drop_unknown_focus_areas(cls, v):
        if v is None:
            return None
        return resolve_focus_areas(v)


# ──── Aggregated data ────

class StatusCount(BaseModel):
    status: str
    count: int
    percentage: float


class IndustryCount(BaseModel):
    industry: str
    count: int
    percentage: Optional[float] = None


class CompanyCount(BaseModel):
    company: str
    count: int


class TrendPoint(BaseModel):
    period: str
    count: int


class ConversionRate(BaseModel):
    applied: int
    converted: int
    rate: float


class ResponseTime(BaseModel):
    average_days: float
    count: int


class JobRow(BaseModel):
    company: Optional[str] = None
    title: Optional[str] = None
    status: Optional[str] = None
    industry: Optional[str] = None
    location: Optional[str] = None
    applied_date: Optional[datetime] = None
    source: Optional[str] = None


class Insight(BaseModel):
    """One narrative insight. type is None only for the 'unavailable' placeholder."""

    title: str
    content: str
    type: Optional[FocusArea] = None


class ReportData(BaseModel):
    """
    Canonical aggregated view of a report.

    Every metric section is optional: it is present only when the configuration
    asked for it. Renderers and insight prompts read from here and never
    recompute metrics.
    """

    report_name: str
    generated_at: datetime
    date_range: DateBounds
    total_jobs: int = 0

    total_applications: Optional[int] = None
    applications_by_status: Optional[List[StatusCount]] = None
    applications_by_industry: Optional[List[IndustryCount]] = None
    applications_by_company: Optional[List[CompanyCount]] = None
    interview_conversion_rate: Optional[ConversionRate] = None
    offer_conversion_rate: Optional[ConversionRate] = None
    average_response_time: Optional[ResponseTime] = None
    application_trend: Optional[List[TrendPoint]] = None
    interview_trend: Optional[List[TrendPoint]] = None
    top_companies: Optional[List[CompanyCount]] = None
    top_industries: Optional[List[IndustryCount]] = None
    status_distribution: Optional[List[StatusCount]] = None
    ghosted_applications: Optional[int] = None
    follow_up_needed: Optional[int] = None

    jobs: List[JobRow] = Field(default_factory=list)
    ai_insights: Optional[List[Insight]] = None


class GenerateRequest(BaseModel):
    """Body of POST /api/reports/generate. One of the two must be supplied."""

    config_id: Optional[int] = None
    ad_hoc_config: Optional[ReportConfig] = None
