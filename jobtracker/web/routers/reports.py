"""Reports router: configuration CRUD, generation and export."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from jobtracker.core.database import get_db
from jobtracker.core.models import ExportFormat
from jobtracker.core.schemas import StandardResponse
from jobtracker.reporting.database import ReportConfiguration
from jobtracker.reporting.schemas import GenerateRequest, ReportConfig, ReportConfigUpdate
from jobtracker.reporting.service import (
    ReportNotFoundError,
    ReportRenderError,
    ReportService,
    ReportValidationError,
)
from jobtracker.web.dependencies import get_current_user_id, get_report_service
from jobtracker.web.responses import collection, success

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/reports",
    tags=["Reporting"]
)


def _serialize_config(row: ReportConfiguration) -> dict:
    return row.to_dict()


@router.post("/config", response_model=StandardResponse[dict], summary="Create Report Configuration")
async def create_report_config(
    config: ReportConfig,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db),
    service: ReportService = Depends(get_report_service),
):
    row = await service.create_config(session, user_id, config)
    return StandardResponse(data=_serialize_config(row), message="Report configuration created")


@router.get("/config", summary="List Report Configurations")
async def list_report_configs(
    include_templates: bool = Query(False),
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db),
    service: ReportService = Depends(get_report_service),
):
    """User's saved configurations, newest first, optionally followed by public templates."""
    user_reports, templates = await service.list_configs(session, user_id, include_templates)
    response = collection([row.to_dict() for row in user_reports])
    if include_templates:
        response["templates"] = [row.to_dict() for row in templates]
    return response


@router.get("/config/{config_id}", response_model=StandardResponse[dict], summary="Get Report Configuration")
async def get_report_config(
    config_id: int,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db),
    service: ReportService = Depends(get_report_service),
):
    try:
        row = await service.get_config(session, config_id, user_id)
    except ReportNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return StandardResponse(data=_serialize_config(row))


@router.put("/config/{config_id}", response_model=StandardResponse[dict], summary="Update Report Configuration")
async def update_report_config(
    config_id: int,
    changes: ReportConfigUpdate,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db),
    service: ReportService = Depends(get_report_service),
):
    """Templates and other users' configurations are not editable (404)."""
    try:
        row = await service.update_config(session, config_id, user_id, changes)
    except ReportNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ReportValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return StandardResponse(data=_serialize_config(row), message="Report configuration updated")


@router.delete("/config/{config_id}", summary="Delete Report Configuration")
async def delete_report_config(
    config_id: int,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db),
    service: ReportService = Depends(get_report_service),
):
    try:
        await service.delete_config(session, config_id, user_id)
    except ReportNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return success("Report configuration deleted")


@router.post("/generate", response_model=StandardResponse[dict], summary="Generate Report")
async def generate_report(
    request: GenerateRequest,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db),
    service: ReportService = Depends(get_report_service),
):
    """Aggregate a saved or ad-hoc configuration, with AI insights when requested."""
    try:
        report_data, _ = await service.generate(
            session, user_id, config_id=request.config_id, ad_hoc=request.ad_hoc_config
        )
    except ReportValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ReportNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return StandardResponse(data=report_data.model_dump(mode="json"))


async def _export(session: AsyncSession, service: ReportService, user_id: str, config_id: int, export_format: ExportFormat):
    try:
        exported = await service.export(session, user_id, config_id, export_format)
    except ReportNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ReportRenderError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return Response(
        content=exported.content,
        media_type=exported.media_type,
        headers={"Content-Disposition": f'attachment; filename="{exported.filename}"'},
    )


@router.get("/{config_id}/export/pdf", summary="Export PDF")
async def export_pdf(
    config_id: int,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db),
    service: ReportService = Depends(get_report_service),
):
    return await _export(session, service, user_id, config_id, ExportFormat.PDF)


@router.get("/{config_id}/export/excel", summary="Export Excel")
async def export_excel(
    config_id: int,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db),
    service: ReportService = Depends(get_report_service),
):
    return await _export(session, service, user_id, config_id, ExportFormat.EXCEL)
