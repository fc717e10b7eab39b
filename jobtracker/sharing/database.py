"""
Shared report snapshots and their access log.
A share is never deleted; revocation (is_active = False) is terminal.
"""
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text, JSON, Index, func
from sqlalchemy.orm import Mapped, mapped_column

from jobtracker.core.database import Base
from jobtracker.core.utils import utcnow


class SharedReport(Base):
    """
    Frozen ReportData snapshot plus the policy gating public access to it.
    The snapshot is written once at creation and never recomputed.
    """
    __tablename__ = "shared_reports"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    token: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    report_config_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)  # FK to report_configurations.id
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    report_name: Mapped[str] = mapped_column(String(200), nullable=False)
    report_snapshot: Mapped[dict] = mapped_column(JSON, nullable=False)

    expiration_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    password_hash: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    # pbkdf2_sha256$<iterations>$<salt hex>$<digest hex>
    allowed_emails: Mapped[Optional[list]] = mapped_column(JSON, nullable=True)
    # lower-cased, trimmed

    share_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    shared_with: Mapped[Optional[list]] = mapped_column(JSON, nullable=True)

    view_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_accessed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), index=True)

    __table_args__ = (
        Index("ix_shared_reports_user_created", "user_id", "created_at"),
    )

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        """Active and not yet expired."""
        now = now or utcnow()
        return bool(self.is_active) and now < self.expiration_date

    def __repr__(self) -> str:
        return f"<SharedReport(id={self.id}, token={self.token[:8]}..., active={self.is_active})>"


# APPEND-ONLY. One row per authorized view. Never UPDATE or DELETE.
class SharedReportAccessLog(Base):
    __tablename__ = "shared_report_access_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    shared_report_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("shared_reports.id"), nullable=False, index=True
    )
    accessed_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    ip_address: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<SharedReportAccessLog(id={self.id}, shared_report_id={self.shared_report_id})>"
