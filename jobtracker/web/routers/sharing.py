"""Owner-side sharing router: create, list and revoke shares."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from jobtracker.core.database import get_db
from jobtracker.core.schemas import StandardResponse
from jobtracker.reporting.service import ReportNotFoundError, ReportValidationError
from jobtracker.sharing.schemas import ShareRequest
from jobtracker.sharing.service import ShareNotFoundError, SharingGateway, TokenCollisionError
from jobtracker.web.dependencies import get_current_user_id, get_sharing_gateway
from jobtracker.web.responses import collection, success

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/reports",
    tags=["Sharing"]
)


@router.post("/{config_id}/share", response_model=StandardResponse[dict], summary="Share Report")
async def share_report(
    config_id: int,
    request: Request,
    share_request: Optional[ShareRequest] = None,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db),
    gateway: SharingGateway = Depends(get_sharing_gateway),
):
    """Freeze the report now and return a public link to the snapshot."""
    try:
        created = await gateway.create(
            session, config_id, user_id, share_request, base_url=str(request.base_url)
        )
    except ReportNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ReportValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except TokenCollisionError as e:
        logger.error(str(e))
        raise HTTPException(status_code=500, detail="Could not create share link")
    return StandardResponse(data=created.model_dump(mode="json"), message="Report shared")


@router.get("/shared", summary="List Shared Reports")
async def list_shared_reports(
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db),
    gateway: SharingGateway = Depends(get_sharing_gateway),
):
    shares = await gateway.list_for_owner(session, user_id)
    return collection([share.model_dump(mode="json") for share in shares])


@router.delete("/shared/{share_id}", summary="Revoke Shared Report")
async def revoke_shared_report(
    share_id: int,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db),
    gateway: SharingGateway = Depends(get_sharing_gateway),
):
    try:
        await gateway.revoke(session, share_id, user_id)
    except ShareNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return success("Shared report revoked", share_id=share_id)
