"""Pydantic models for the sharing API."""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ShareRequest(BaseModel):
    """Body of POST /api/reports/{id}/share."""
    expiration_days: Optional[int] = Field(default=None, ge=1)
    password: Optional[str] = None
    allowed_emails: Optional[List[str]] = None
    share_message: Optional[str] = None
    shared_with: Optional[List[str]] = None


class ShareCreated(BaseModel):
    share_id: int
    token: str
    share_url: str
    expiration_date: datetime


class SharedReportSummary(BaseModel):
    """Listing projection: no snapshot, no access log."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    token: str
    report_config_id: int
    report_name: str
    expiration_date: datetime
    is_active: bool
    is_valid: bool
    has_password: bool
    allowed_emails: Optional[List[str]] = None
    share_message: Optional[str] = None
    shared_with: Optional[List[str]] = None
    view_count: int
    last_accessed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class SharedReportView(BaseModel):
    """What a public viewer receives."""
    report_name: str
    share_message: Optional[str] = None
    expiration_date: datetime
    view_count: int
    report_data: Dict[str, Any]
