"""
Sharing gateway: freeze a report into a token-addressed snapshot and serve it publicly.

Views never aggregate or call the text generator; they read the stored snapshot.
"""
import hashlib
import logging
import secrets
from datetime import timedelta
from typing import Callable, List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import load_only

from jobtracker.core.config import settings
from jobtracker.core.utils import normalize_email, utcnow
from jobtracker.reporting.service import ReportService, ReportValidationError
from jobtracker.sharing.database import SharedReport, SharedReportAccessLog
from jobtracker.sharing.schemas import ShareCreated, ShareRequest, SharedReportSummary

logger = logging.getLogger(__name__)

PBKDF2_ALGORITHM = "pbkdf2_sha256"
PBKDF2_ITERATIONS = 260000
MAX_TOKEN_ATTEMPTS = 5
ACCESS_DENIED = "Access denied"


class ShareNotFoundError(LookupError):
    """No share with this token (or id, for the owner)."""


class ShareAccessDeniedError(PermissionError):
    """Share exists but its policy rejects the request. The message never says which check failed."""

    def __init__(self):
        super().__init__(ACCESS_DENIED)


class TokenCollisionError(RuntimeError):
    """Could not mint a unique token within the retry budget."""


def new_token() -> str:
    return secrets.token_urlsafe(32)


def hash_password(password: str) -> str:
    salt = secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return f"{PBKDF2_ALGORITHM}${PBKDF2_ITERATIONS}${salt.hex()}${digest.hex()}"


def verify_password(password: Optional[str], stored: str) -> bool:
    if password is None:
        return False
    try:
        algorithm, iterations, salt_hex, digest_hex = stored.split("$")
        salt = bytes.fromhex(salt_hex)
        rounds = int(iterations)
    except ValueError:
        logger.error("Unreadable password hash on shared report")
        return False
    if algorithm != PBKDF2_ALGORITHM or rounds < 1:
        return False
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, rounds)
    return secrets.compare_digest(digest.hex(), digest_hex)


def normalize_emails(emails: Optional[List[str]]) -> Optional[List[str]]:
    """Trimmed, lower-cased, de-duplicated; None when nothing remains."""
    if not emails:
        return None
    seen = []
    for email in emails:
        normalized = normalize_email(email)
        if normalized and normalized not in seen:
            seen.append(normalized)
    return seen or None


def share_url(token: str, base_url: Optional[str] = None) -> str:
    base = (base_url or settings.public_base_url).rstrip("/")
    return f"{base}/api/public/reports/{token}"


def to_summary(share: SharedReport, now=None) -> SharedReportSummary:
    return SharedReportSummary(
        id=share.id,
        token=share.token,
        report_config_id=share.report_config_id,
        report_name=share.report_name,
        expiration_date=share.expiration_date,
        is_active=share.is_active,
        is_valid=share.is_valid(now),
        has_password=share.password_hash is not None,
        allowed_emails=share.allowed_emails,
        share_message=share.share_message,
        shared_with=share.shared_with,
        view_count=share.view_count,
        last_accessed_at=share.last_accessed_at,
        created_at=share.created_at,
    )


class SharingGateway:
    """Create, view, revoke and list shared report snapshots."""

    def __init__(
        self,
        report_service: ReportService,
        clock: Callable = utcnow,
        token_factory: Callable[[], str] = new_token,
    ):
        self.report_service = report_service
        self.clock = clock
        self.token_factory = token_factory

    async def create(
        self,
        session: AsyncSession,
        config_id: int,
        owner: str,
        request: Optional[ShareRequest] = None,
        base_url: Optional[str] = None,
    ) -> ShareCreated:
        """
        Aggregate once (plus insights when configured), freeze the result and mint a token.

        Raises:
            ReportNotFoundError: configuration not visible to owner
            ReportValidationError: expiration outside 1..max_share_expiration_days
            TokenCollisionError: every minted token collided
        """
        request = request or ShareRequest()
        expiration_days = request.expiration_days
        if expiration_days is None:
            expiration_days = settings.default_share_expiration_days
        if not 1 <= expiration_days <= settings.max_share_expiration_days:
            raise ReportValidationError(
                f"expiration_days must be between 1 and {settings.max_share_expiration_days}"
            )

        row = await self.report_service.get_config(session, config_id, owner)
        # Rollbacks below expire loaded rows; read everything needed now.
        config = row.to_config()
        report_config_id = row.id

        report_data = await self.report_service.build_report_data(session, owner, config)
        snapshot = report_data.model_dump(mode="json")
        password_hash = hash_password(request.password) if request.password else None
        allowed_emails = normalize_emails(request.allowed_emails)
        expiration_date = self.clock() + timedelta(days=expiration_days)

        for attempt in range(1, MAX_TOKEN_ATTEMPTS + 1):
            share = SharedReport(
                token=self.token_factory(),
                report_config_id=report_config_id,
                user_id=owner,
                report_name=config.name,
                report_snapshot=snapshot,
                expiration_date=expiration_date,
                is_active=True,
                password_hash=password_hash,
                allowed_emails=allowed_emails,
                share_message=request.share_message,
                shared_with=request.shared_with or None,
                view_count=0,
            )
            session.add(share)
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                logger.warning(f"Share token collision (attempt {attempt}/{MAX_TOKEN_ATTEMPTS})")
                continue

            logger.info(f"Created share {share.id} for configuration {report_config_id} (expires {expiration_date:%Y-%m-%d})")
            return ShareCreated(
                share_id=share.id,
                token=share.token,
                share_url=share_url(share.token, base_url),
                expiration_date=expiration_date,
            )

        raise TokenCollisionError(f"Could not mint a unique share token after {MAX_TOKEN_ATTEMPTS} attempts")

    async def view(
        self,
        session: AsyncSession,
        token: str,
        password: Optional[str] = None,
        email: Optional[str] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> SharedReport:
        """
        Return the frozen snapshot record after an authorized view has been recorded.

        Denied attempts change nothing.
        """
        result = await session.execute(select(SharedReport).where(SharedReport.token == token))
        share = result.scalar_one_or_none()
        if share is None:
            raise ShareNotFoundError("Shared report not found")

        now = self.clock()
        if not self._authorized(share, now, password, email):
            logger.info(f"Denied view of share {token[:8]}...")
            raise ShareAccessDeniedError()

        session.add(SharedReportAccessLog(
            shared_report_id=share.id,
            accessed_at=now,
            ip_address=ip_address,
            user_agent=user_agent,
            email=normalize_email(email) or None,
        ))
        await session.execute(
            update(SharedReport)
            .where(SharedReport.id == share.id)
            .values(view_count=SharedReport.view_count + 1, last_accessed_at=now)
        )
        await session.commit()
        await session.refresh(share)
        return share

    def _authorized(self, share: SharedReport, now, password: Optional[str], email: Optional[str]) -> bool:
        if not share.is_valid(now):
            return False
        if share.password_hash and not verify_password(password, share.password_hash):
            return False
        if share.allowed_emails and normalize_email(email) not in share.allowed_emails:
            return False
        return True

    async def revoke(self, session: AsyncSession, share_id: int, owner: str) -> SharedReport:
        """Deactivate a share. Revoking twice is a no-op."""
        result = await session.execute(
            select(SharedReport).where(SharedReport.id == share_id, SharedReport.user_id == owner)
        )
        share = result.scalar_one_or_none()
        if share is None:
            raise ShareNotFoundError("Shared report not found")

        if share.is_active:
            share.is_active = False
            await session.commit()
            logger.info(f"Revoked share {share_id}")
        return share

    async def list_for_owner(self, session: AsyncSession, owner: str) -> List[SharedReportSummary]:
        """Owner's shares, newest first, without snapshot payloads."""
        result = await session.execute(
            select(SharedReport)
            .options(load_only(
                SharedReport.id,
                SharedReport.token,
                SharedReport.report_config_id,
                SharedReport.report_name,
                SharedReport.expiration_date,
                SharedReport.is_active,
                SharedReport.password_hash,
                SharedReport.allowed_emails,
                SharedReport.share_message,
                SharedReport.shared_with,
                SharedReport.view_count,
                SharedReport.last_accessed_at,
                SharedReport.created_at,
            ))
            .where(SharedReport.user_id == owner)
            .order_by(SharedReport.created_at.desc(), SharedReport.id.desc())
        )
        now = self.clock()
        return [to_summary(share, now) for share in result.scalars().all()]
