"""
Shared utilities.
"""
import re
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how DateTime columns are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def sanitize_filename(name: str) -> str:
    """
    Replace every non-alphanumeric character with an underscore.
    "Q3 Review: Tech/Finance" -> "Q3_Review__Tech_Finance"
    """
    if not name:
        return "report"
    return re.sub(r"[^a-zA-Z0-9]", "_", name)


def normalize_email(email: str) -> str:
    if not email:
        return ""
    return email.strip().lower()
