"""Unit tests for report configuration management, generation and export."""
from unittest.mock import patch

import pytest

from jobtracker.core.models import ExportFormat, FocusArea
from jobtracker.reporting.database import SYSTEM_OWNER
from jobtracker.reporting.insights import InsightOrchestrator
from jobtracker.reporting.schemas import ReportConfig, ReportConfigUpdate
from jobtracker.reporting.service import (
    ReportNotFoundError,
    ReportRenderError,
    ReportService,
    ReportValidationError,
)
from jobtracker.reporting.templates import BUILT_IN_TEMPLATES, seed_templates


@pytest.fixture
def service(clock, stub_generator):
    return ReportService(insights=InsightOrchestrator(stub_generator, timeout=1), clock=clock)


def _config(name="My Report", **kwargs):
    return ReportConfig(name=name, **kwargs)


class TestConfigurations:

    @pytest.mark.asyncio
    async def test_create_and_get(self, service, async_db_session):
        row = await service.create_config(async_db_session, "alice", _config(insights_focus=["patterns"]))
        assert row.id is not None
        assert row.is_template is False
        assert row.generation_count == 0

        fetched = await service.get_config(async_db_session, row.id, "alice")
        assert fetched.to_config().insights_focus == [FocusArea.PATTERNS]

    @pytest.mark.asyncio
    async def test_other_users_config_is_not_found(self, service, async_db_session):
        row = await service.create_config(async_db_session, "alice", _config())
        with pytest.raises(ReportNotFoundError):
            await service.get_config(async_db_session, row.id, "bob")

    @pytest.mark.asyncio
    async def test_list_newest_first_with_templates(self, service, async_db_session):
        await seed_templates(async_db_session)
        first = await service.create_config(async_db_session, "alice", _config("First"))
        second = await service.create_config(async_db_session, "alice", _config("Second"))
        await service.create_config(async_db_session, "bob", _config("Bob's"))

        own, templates = await service.list_configs(async_db_session, "alice", include_templates=True)

        assert [r.id for r in own] == [second.id, first.id]
        assert len(templates) == len(BUILT_IN_TEMPLATES)
        categories = [t.template_category for t in templates]
        assert categories == sorted(categories)

    @pytest.mark.asyncio
    async def test_list_without_templates(self, service, async_db_session):
        await seed_templates(async_db_session)
        own, templates = await service.list_configs(async_db_session, "alice")
        assert own == []
        assert templates == []

    @pytest.mark.asyncio
    async def test_update_applies_only_given_fields(self, service, async_db_session):
        row = await service.create_config(async_db_session, "alice", _config(description="old"))
        updated = await service.update_config(
            async_db_session, row.id, "alice", ReportConfigUpdate(name="Renamed", include_ai_insights=True)
        )
        assert updated.name == "Renamed"
        assert updated.description == "old"
        assert updated.include_ai_insights is True

    @pytest.mark.asyncio
    async def test_update_with_invalid_merge_is_validation_error(self, service, async_db_session):
        row = await service.create_config(async_db_session, "alice", _config())
        with pytest.raises(ReportValidationError):
            await service.update_config(async_db_session, row.id, "alice", ReportConfigUpdate(name=None))

    @pytest.mark.asyncio
    async def test_delete(self, service, async_db_session):
        row = await service.create_config(async_db_session, "alice", _config())
        await service.delete_config(async_db_session, row.id, "alice")
        with pytest.raises(ReportNotFoundError):
            await service.get_config(async_db_session, row.id, "alice")

    @pytest.mark.asyncio
    async def test_templates_are_visible_but_not_editable(self, service, async_db_session):
        await seed_templates(async_db_session)
        _, templates = await service.list_configs(async_db_session, "alice", include_templates=True)
        template = templates[0]

        assert (await service.get_config(async_db_session, template.id, "alice")).id == template.id
        with pytest.raises(ReportNotFoundError):
            await service.update_config(async_db_session, template.id, "alice", ReportConfigUpdate(name="Mine"))
        with pytest.raises(ReportNotFoundError):
            await service.delete_config(async_db_session, template.id, "alice")
        with pytest.raises(ReportNotFoundError):
            await service.delete_config(async_db_session, template.id, SYSTEM_OWNER)

    @pytest.mark.asyncio
    async def test_seed_templates_is_idempotent(self, async_db_session):
        assert await seed_templates(async_db_session) == len(BUILT_IN_TEMPLATES)
        assert await seed_templates(async_db_session) == 0


class TestGeneration:

    @pytest.mark.asyncio
    async def test_requires_config_id_or_ad_hoc(self, service, async_db_session):
        with pytest.raises(ReportValidationError):
            await service.generate(async_db_session, "alice")

    @pytest.mark.asyncio
    async def test_saved_config_bumps_generation_metadata(self, service, async_db_session, sample_job):
        await sample_job()
        row = await service.create_config(async_db_session, "alice", _config())

        data, updated = await service.generate(async_db_session, "alice", config_id=row.id)
        assert data.total_applications == 1
        assert updated.generation_count == 1
        assert updated.last_generated is not None

        _, updated = await service.generate(async_db_session, "alice", config_id=row.id)
        assert updated.generation_count == 2

    @pytest.mark.asyncio
    async def test_ad_hoc_config(self, service, async_db_session, sample_job):
        await sample_job()
        data, row = await service.generate(async_db_session, "alice", ad_hoc=_config("Ad hoc"))
        assert row is None
        assert data.report_name == "Ad hoc"
        assert data.ai_insights is None

    @pytest.mark.asyncio
    async def test_insights_attached_when_requested(self, service, async_db_session, stub_generator):
        config = _config(include_ai_insights=True, insights_focus=["strengths", "trends"])
        data, _ = await service.generate(async_db_session, "alice", ad_hoc=config)
        assert [i.type for i in data.ai_insights] == [FocusArea.STRENGTHS, FocusArea.TRENDS]
        assert len(stub_generator.calls) == 2

    @pytest.mark.asyncio
    async def test_insights_not_requested_makes_no_calls(self, service, async_db_session, stub_generator):
        await service.generate(async_db_session, "alice", ad_hoc=_config(insights_focus=["trends"]))
        assert stub_generator.calls == []

    @pytest.mark.asyncio
    async def test_generation_survives_failing_text_generator(self, clock, async_db_session):
        class Broken:
            async def generate(self, prompt, options):
                raise RuntimeError("AI API Failed: 503")

        service = ReportService(insights=InsightOrchestrator(Broken(), timeout=1), clock=clock)
        data, _ = await service.generate(
            async_db_session, "alice", ad_hoc=_config(include_ai_insights=True, insights_focus=["trends"])
        )
        assert data.ai_insights == []


class TestExport:

    @pytest.mark.asyncio
    async def test_pdf_export(self, service, async_db_session, sample_job):
        await sample_job()
        row = await service.create_config(async_db_session, "alice", _config("Q3 Review: Tech/Finance"))

        exported = await service.export(async_db_session, "alice", row.id, ExportFormat.PDF)

        assert exported.content.startswith(b"%PDF")
        assert exported.media_type == "application/pdf"
        assert exported.filename == "Q3_Review__Tech_Finance_2024-06-15.pdf"

    @pytest.mark.asyncio
    async def test_excel_export(self, service, async_db_session):
        row = await service.create_config(async_db_session, "alice", _config())
        exported = await service.export(async_db_session, "alice", row.id, ExportFormat.EXCEL)
        assert exported.content[:2] == b"PK"
        assert exported.filename == "My_Report_2024-06-15.xlsx"

    @pytest.mark.asyncio
    async def test_export_is_repeatable(self, service, async_db_session, sample_job):
        await sample_job()
        row = await service.create_config(async_db_session, "alice", _config())
        first = await service.export(async_db_session, "alice", row.id, ExportFormat.PDF)
        second = await service.export(async_db_session, "alice", row.id, ExportFormat.PDF)
        assert first.content == second.content

    @pytest.mark.asyncio
    async def test_render_failure_raises_render_error(self, service, async_db_session):
        row = await service.create_config(async_db_session, "alice", _config())
        with patch(
            "jobtracker.reporting.generators.pdf_generator.PDFReportGenerator.render",
            side_effect=ValueError("font missing"),
        ):
            with pytest.raises(ReportRenderError):
                await service.export(async_db_session, "alice", row.id, ExportFormat.PDF)

    @pytest.mark.asyncio
    async def test_export_unknown_config(self, service, async_db_session):
        with pytest.raises(ReportNotFoundError):
            await service.export(async_db_session, "alice", 999, ExportFormat.EXCEL)
