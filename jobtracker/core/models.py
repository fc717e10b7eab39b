"""
Core enums for the job tracker.

NOTE: These are NOT database models. For SQLAlchemy ORM models, see each module's database.py:
  - Job/ApplicationStatus/Interview → jobtracker/jobs/database.py
  - ReportConfiguration → jobtracker/reporting/database.py
  - SharedReport/SharedReportAccessLog → jobtracker/sharing/database.py
"""
import logging
from enum import Enum
from typing import Iterable, List

logger = logging.getLogger(__name__)


class FocusArea(str, Enum):
    TRENDS = "trends"
    RECOMMENDATIONS = "recommendations"
    STRENGTHS = "strengths"
    IMPROVEMENTS = "improvements"
    PATTERNS = "patterns"


class DateRangeType(str, Enum):
    CUSTOM = "custom"
    LAST_7_DAYS = "last7days"
    LAST_30_DAYS = "last30days"
    LAST_90_DAYS = "last90days"
    THIS_MONTH = "thisMonth"
    LAST_MONTH = "lastMonth"
    THIS_YEAR = "thisYear"
    ALL_TIME = "allTime"


class ChartStyle(str, Enum):
    BAR = "bar"
    LINE = "line"
    PIE = "pie"
    DOUGHNUT = "doughnut"
    AREA = "area"
    TABLE = "table"


class ColorScheme(str, Enum):
    DEFAULT = "default"
    PROFESSIONAL = "professional"
    VIBRANT = "vibrant"
    MONOCHROME = "monochrome"


class ExportFormat(str, Enum):
    PDF = "pdf"
    EXCEL = "excel"


# Job statuses the conversion metrics and distribution are defined over.
JOB_STATUSES = ["Interested", "Applied", "Interview", "Offer", "Rejected", "Ghosted", "Accepted"]


def resolve_focus_areas(values: Iterable) -> List[FocusArea]:
    """
    Map raw focus tags to FocusArea members, keeping first-seen order.
    Unknown tags are dropped and duplicates collapse to their first position.
    """
    resolved: List[FocusArea] = []
    for value in values or []:
        try:
            area = FocusArea(value)
        except ValueError:
            logger.debug("Ignoring unknown insight focus area: %r", value)
            continue
        if area not in resolved:
            resolved.append(area)
    return resolved
