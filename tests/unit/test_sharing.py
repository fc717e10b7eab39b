"""Unit tests for the sharing gateway: snapshot freeze, access policy, revocation."""
import asyncio
from datetime import timedelta

import pytest
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from jobtracker.core.database import Base
from jobtracker.reporting.insights import InsightOrchestrator
from jobtracker.reporting.schemas import ReportConfig
from jobtracker.reporting.service import ReportNotFoundError, ReportService, ReportValidationError
from jobtracker.sharing.database import SharedReport, SharedReportAccessLog
from jobtracker.sharing.schemas import ShareRequest
from jobtracker.sharing.service import (
    ShareAccessDeniedError,
    ShareNotFoundError,
    SharingGateway,
    TokenCollisionError,
    hash_password,
    normalize_emails,
    share_url,
    verify_password,
)
from tests.conftest import NOW


class Clock:
    """Adjustable clock so expiry can be simulated."""

    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def test_clock():
    return Clock(NOW)


@pytest.fixture
def report_service(test_clock, stub_generator):
    return ReportService(insights=InsightOrchestrator(stub_generator, timeout=1), clock=test_clock)


@pytest.fixture
def gateway(report_service, test_clock):
    return SharingGateway(report_service, clock=test_clock)


@pytest.fixture
async def saved_config(report_service, async_db_session, sample_job):
    await sample_job(company="Acme")
    await sample_job(company="Globex", status="Interview")
    config = ReportConfig(name="Shared Report", date_range={"type": "last30days"}, metrics={"total_applications": True})
    return await report_service.create_config(async_db_session, "alice", config)


async def _log_count(session, share_id):
    result = await session.execute(
        select(func.count()).select_from(SharedReportAccessLog).where(SharedReportAccessLog.shared_report_id == share_id)
    )
    return result.scalar_one()


class TestPasswordsAndEmails:

    def test_hash_round_trip(self):
        stored = hash_password("hunter2")
        assert stored.startswith("pbkdf2_sha256$")
        assert "hunter2" not in stored
        assert verify_password("hunter2", stored)
        assert not verify_password("hunter3", stored)
        assert not verify_password(None, stored)

    def test_same_password_different_salt(self):
        assert hash_password("x") != hash_password("x")

    def test_normalize_emails(self):
        assert normalize_emails([" Ann@Example.com", "ann@example.com", ""]) == ["ann@example.com"]
        assert normalize_emails([]) is None
        assert normalize_emails(None) is None

    def test_share_url(self):
        assert share_url("abc", "http://testserver/") == "http://testserver/api/public/reports/abc"

    @pytest.mark.parametrize("stored", [
        "garbage",
        "pbkdf2_sha256$abc$00ff$00",
        "pbkdf2_sha256$260000$not-hex$00",
        "pbkdf2_sha256$0$00ff$00",
        "md5$1$00ff$00",
    ])
    def test_corrupted_hash_is_a_mismatch(self, stored):
        assert verify_password("hunter2", stored) is False


class TestCreate:

    @pytest.mark.asyncio
    async def test_create_freezes_snapshot(self, gateway, async_db_session, saved_config):
        created = await gateway.create(async_db_session, saved_config.id, "alice", ShareRequest(expiration_days=7))

        assert created.expiration_date == NOW + timedelta(days=7)
        assert created.share_url.endswith(f"/api/public/reports/{created.token}")
        share = (await async_db_session.execute(
            select(SharedReport).where(SharedReport.id == created.share_id)
        )).scalar_one()
        assert share.report_name == "Shared Report"
        assert share.report_snapshot["total_applications"] == 2
        assert share.view_count == 0
        assert share.is_active is True

    @pytest.mark.asyncio
    async def test_default_expiration(self, gateway, async_db_session, saved_config):
        created = await gateway.create(async_db_session, saved_config.id, "alice")
        assert created.expiration_date == NOW + timedelta(days=7)

    @pytest.mark.parametrize("days", [0, 91])
    @pytest.mark.asyncio
    async def test_expiration_out_of_range(self, gateway, async_db_session, saved_config, days):
        with pytest.raises(ReportValidationError):
            await gateway.create(async_db_session, saved_config.id, "alice", ShareRequest.model_construct(expiration_days=days))

    @pytest.mark.asyncio
    async def test_cannot_share_someone_elses_config(self, gateway, async_db_session, saved_config):
        with pytest.raises(ReportNotFoundError):
            await gateway.create(async_db_session, saved_config.id, "bob")

    @pytest.mark.asyncio
    async def test_two_shares_get_distinct_tokens(self, gateway, async_db_session, saved_config):
        first = await gateway.create(async_db_session, saved_config.id, "alice")
        second = await gateway.create(async_db_session, saved_config.id, "alice")
        assert first.token != second.token
        assert len(first.token) >= 32

    @pytest.mark.asyncio
    async def test_password_stored_hashed_and_emails_normalized(self, gateway, async_db_session, saved_config):
        request = ShareRequest(password="s3cret", allowed_emails=["Recruiter@Corp.com "])
        created = await gateway.create(async_db_session, saved_config.id, "alice", request)
        share = (await async_db_session.execute(
            select(SharedReport).where(SharedReport.id == created.share_id)
        )).scalar_one()
        assert share.password_hash != "s3cret"
        assert share.allowed_emails == ["recruiter@corp.com"]

    @pytest.mark.asyncio
    async def test_token_collision_retries(self, report_service, test_clock, async_db_session, saved_config):
        tokens = iter(["dup-token", "dup-token", "fresh-token"])
        gateway = SharingGateway(report_service, clock=test_clock, token_factory=lambda: next(tokens))

        first = await gateway.create(async_db_session, saved_config.id, "alice")
        second = await gateway.create(async_db_session, saved_config.id, "alice")

        assert first.token == "dup-token"
        assert second.token == "fresh-token"

    @pytest.mark.asyncio
    async def test_token_collision_gives_up(self, report_service, test_clock, async_db_session, saved_config):
        gateway = SharingGateway(report_service, clock=test_clock, token_factory=lambda: "same")
        await gateway.create(async_db_session, saved_config.id, "alice")
        with pytest.raises(TokenCollisionError):
            await gateway.create(async_db_session, saved_config.id, "alice")

    @pytest.mark.asyncio
    async def test_insights_are_frozen_into_snapshot(self, gateway, report_service, async_db_session, stub_generator):
        config = ReportConfig(name="With insights", include_ai_insights=True, insights_focus=["trends"])
        row = await report_service.create_config(async_db_session, "alice", config)

        created = await gateway.create(async_db_session, row.id, "alice")
        calls_after_create = len(stub_generator.calls)
        share = await gateway.view(async_db_session, created.token)

        assert share.report_snapshot["ai_insights"][0]["type"] == "trends"
        assert len(stub_generator.calls) == calls_after_create == 1


class TestView:

    @pytest.mark.asyncio
    async def test_view_scenario(self, gateway, async_db_session, saved_config, test_clock):
        created = await gateway.create(async_db_session, saved_config.id, "alice", ShareRequest(expiration_days=7))

        share = await gateway.view(async_db_session, created.token, ip_address="10.0.0.1", user_agent="pytest")
        assert share.view_count == 1
        assert share.report_snapshot["report_name"] == "Shared Report"
        assert share.last_accessed_at == NOW

        share = await gateway.view(async_db_session, created.token)
        assert share.view_count == 2
        assert await _log_count(async_db_session, share.id) == 2

        test_clock.now = NOW + timedelta(days=7)
        with pytest.raises(ShareAccessDeniedError):
            await gateway.view(async_db_session, created.token)

    @pytest.mark.asyncio
    async def test_snapshot_does_not_follow_live_data(self, gateway, async_db_session, saved_config, sample_job):
        created = await gateway.create(async_db_session, saved_config.id, "alice")
        await sample_job(company="Initech")
        share = await gateway.view(async_db_session, created.token)
        assert share.report_snapshot["total_applications"] == 2

    @pytest.mark.asyncio
    async def test_unknown_token(self, gateway, async_db_session):
        with pytest.raises(ShareNotFoundError):
            await gateway.view(async_db_session, "nope")

    @pytest.mark.asyncio
    async def test_wrong_password_changes_nothing(self, gateway, async_db_session, saved_config):
        created = await gateway.create(async_db_session, saved_config.id, "alice", ShareRequest(password="s3cret"))

        with pytest.raises(ShareAccessDeniedError) as exc:
            await gateway.view(async_db_session, created.token, password="wrong")
        assert str(exc.value) == "Access denied"
        with pytest.raises(ShareAccessDeniedError):
            await gateway.view(async_db_session, created.token)

        share = (await async_db_session.execute(
            select(SharedReport).where(SharedReport.id == created.share_id)
        )).scalar_one()
        assert share.view_count == 0
        assert await _log_count(async_db_session, share.id) == 0

        share = await gateway.view(async_db_session, created.token, password="s3cret")
        assert share.view_count == 1

    @pytest.mark.asyncio
    async def test_corrupted_password_hash_denies(self, gateway, async_db_session, saved_config):
        created = await gateway.create(async_db_session, saved_config.id, "alice", ShareRequest(password="s3cret"))
        await async_db_session.execute(
            update(SharedReport).where(SharedReport.id == created.share_id).values(password_hash="pbkdf2_sha256$x$zz$00")
        )
        await async_db_session.commit()

        with pytest.raises(ShareAccessDeniedError):
            await gateway.view(async_db_session, created.token, password="s3cret")

    @pytest.mark.asyncio
    async def test_email_allow_list(self, gateway, async_db_session, saved_config):
        request = ShareRequest(allowed_emails=["recruiter@corp.com"])
        created = await gateway.create(async_db_session, saved_config.id, "alice", request)

        with pytest.raises(ShareAccessDeniedError) as denied_other:
            await gateway.view(async_db_session, created.token, email="someone@else.com")
        with pytest.raises(ShareAccessDeniedError) as denied_missing:
            await gateway.view(async_db_session, created.token)
        assert str(denied_other.value) == str(denied_missing.value) == "Access denied"

        share = await gateway.view(async_db_session, created.token, email=" Recruiter@CORP.com")
        assert share.view_count == 1
        log = (await async_db_session.execute(select(SharedReportAccessLog))).scalar_one()
        assert log.email == "recruiter@corp.com"

    @pytest.mark.asyncio
    async def test_expired_share_denied_while_active(self, gateway, async_db_session, saved_config, test_clock):
        created = await gateway.create(async_db_session, saved_config.id, "alice", ShareRequest(expiration_days=1))
        test_clock.now = NOW + timedelta(days=1, seconds=1)
        with pytest.raises(ShareAccessDeniedError):
            await gateway.view(async_db_session, created.token)


class TestConcurrentViews:
    """Each viewer has its own session against one file-backed database."""

    VIEWERS = 10

    @pytest.fixture
    async def file_session_factory(self, tmp_path):
        engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'shares.db'}")
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        await engine.dispose()

    @pytest.mark.asyncio
    async def test_no_lost_updates(self, gateway, report_service, file_session_factory):
        async with file_session_factory() as session:
            row = await report_service.create_config(session, "alice", ReportConfig(name="Hot Link"))
            created = await gateway.create(session, row.id, "alice")

        async def view_once(i):
            async with file_session_factory() as session:
                await gateway.view(session, created.token, ip_address=f"10.0.0.{i}")

        await asyncio.gather(*(view_once(i) for i in range(self.VIEWERS)))

        async with file_session_factory() as session:
            share = (await session.execute(
                select(SharedReport).where(SharedReport.id == created.share_id)
            )).scalar_one()
            assert share.view_count == self.VIEWERS
            assert await _log_count(session, share.id) == self.VIEWERS


class TestRevokeAndList:

    @pytest.mark.asyncio
    async def test_revoke_is_terminal_and_idempotent(self, gateway, async_db_session, saved_config, test_clock):
        created = await gateway.create(async_db_session, saved_config.id, "alice", ShareRequest(expiration_days=30))

        share = await gateway.revoke(async_db_session, created.share_id, "alice")
        assert share.is_active is False
        assert share.is_valid(NOW) is False
        share = await gateway.revoke(async_db_session, created.share_id, "alice")
        assert share.is_active is False

        with pytest.raises(ShareAccessDeniedError):
            await gateway.view(async_db_session, created.token)
        test_clock.now = NOW - timedelta(days=1)
        with pytest.raises(ShareAccessDeniedError):
            await gateway.view(async_db_session, created.token)

    @pytest.mark.asyncio
    async def test_only_owner_can_revoke(self, gateway, async_db_session, saved_config):
        created = await gateway.create(async_db_session, saved_config.id, "alice")
        with pytest.raises(ShareNotFoundError):
            await gateway.revoke(async_db_session, created.share_id, "bob")

    @pytest.mark.asyncio
    async def test_list_for_owner_is_a_summary(self, gateway, async_db_session, saved_config):
        first = await gateway.create(async_db_session, saved_config.id, "alice", ShareRequest(password="pw"))
        second = await gateway.create(async_db_session, saved_config.id, "alice")
        await gateway.revoke(async_db_session, first.share_id, "alice")

        shares = await gateway.list_for_owner(async_db_session, "alice")

        assert [s.id for s in shares] == [second.share_id, first.share_id]
        assert shares[1].has_password is True
        assert shares[1].is_valid is False
        assert shares[0].is_valid is True
        dumped = shares[0].model_dump()
        assert "report_snapshot" not in dumped
        assert "password_hash" not in dumped
        assert await gateway.list_for_owner(async_db_session, "bob") == []
