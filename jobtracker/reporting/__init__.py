"""
Reporting Module - Job search analytics, AI insights and exports.
"""

from jobtracker.reporting.service import (
    ExportedReport,
    ReportNotFoundError,
    ReportRenderError,
    ReportService,
    ReportValidationError,
)
from jobtracker.reporting.schemas import ReportConfig, ReportData

__all__ = [
    "ReportService",
    "ReportConfig",
    "ReportData",
    "ExportedReport",
    "ReportNotFoundError",
    "ReportRenderError",
    "ReportValidationError",
]
