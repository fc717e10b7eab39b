"""Base generator class."""

from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional, Tuple

from jobtracker.core.utils import sanitize_filename
from jobtracker.reporting.schemas import ReportConfig, ReportData


class BaseGenerator(ABC):
    """Base class for report renderers."""

    extension: str = ""
    media_type: str = "application/octet-stream"

    def __init__(self, output_dir: Optional[str] = None):
        """Initialize generator. output_dir is only needed for generate()."""
        self.output_dir = Path(output_dir) if output_dir else None

    @abstractmethod
    def render(self, report_data: ReportData, config: ReportConfig) -> bytes:
        """
        Render report data to an in-memory artifact.

        Args:
            report_data: Aggregated data (optionally carrying ai_insights)
            config: Configuration the data was generated from

        Returns:
            Complete artifact bytes
        """
        pass

    def generate(self, report_data: ReportData, config: ReportConfig, filename: str = None) -> str:
        """Render and write the artifact to output_dir. Returns the file path."""
        if self.output_dir is None:
            raise ValueError("output_dir is required to write report files")
        content = self.render(report_data, config)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        output_file = self.output_dir / (filename or self.get_filename(report_data.report_name, report_data.generated_at))
        output_file.write_bytes(content)
        return str(output_file)

    def get_filename(self, report_name: str, generated_at: datetime) -> str:
        """<sanitized name>_<YYYY-MM-DD>.<ext>"""
        return f"{sanitize_filename(report_name)}_{generated_at.strftime('%Y-%m-%d')}.{self.extension}"

    def _format_timestamp(self, value: datetime) -> str:
        return value.strftime("%Y-%m-%d %H:%M UTC")

    def _format_period(self, report_data: ReportData) -> str:
        bounds = report_data.date_range
        start = bounds.start_date.strftime("%Y-%m-%d") if bounds.start_date else "Beginning"
        return f"Period: {start} - {bounds.end_date.strftime('%Y-%m-%d')}"

    def _summary_metrics(self, report_data: ReportData) -> List[Tuple[str, Any]]:
        """(label, value) pairs for the scalar metrics present in the data."""
        metrics: List[Tuple[str, Any]] = []
        if report_data.total_applications is not None:
            metrics.append(("Total Applications", report_data.total_applications))
        if report_data.interview_conversion_rate is not None:
            metrics.append(("Interview Conversion Rate", f"{report_data.interview_conversion_rate.rate}%"))
        if report_data.offer_conversion_rate is not None:
            metrics.append(("Offer Conversion Rate", f"{report_data.offer_conversion_rate.rate}%"))
        if report_data.average_response_time is not None:
            metrics.append(("Average Response Time", f"{report_data.average_response_time.average_days} days"))
        if report_data.ghosted_applications is not None:
            metrics.append(("Ghosted Applications", report_data.ghosted_applications))
        if report_data.follow_up_needed is not None:
            metrics.append(("Follow-ups Needed", report_data.follow_up_needed))
        return metrics
