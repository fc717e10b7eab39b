"""
Core Module - Shared Infrastructure.
"""

from jobtracker.core.config import settings, Settings
from jobtracker.core.database import Base, get_db, get_async_db
from jobtracker.core.models import FocusArea, DateRangeType, ExportFormat

__all__ = [
    "settings",
    "Settings",
    "Base",
    "get_db",
    "get_async_db",
    "FocusArea",
    "DateRangeType",
    "ExportFormat",
]
