"""Public, unauthenticated access to shared report snapshots."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from jobtracker.core.database import get_db
from jobtracker.core.schemas import StandardResponse
from jobtracker.sharing.schemas import SharedReportView
from jobtracker.sharing.service import ACCESS_DENIED, ShareAccessDeniedError, ShareNotFoundError, SharingGateway
from jobtracker.web.dependencies import get_sharing_gateway

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/public/reports",
    tags=["Public"]
)


@router.get("/{token}", response_model=StandardResponse[SharedReportView], summary="View Shared Report")
async def view_shared_report(
    token: str,
    request: Request,
    password: Optional[str] = Query(None),
    email: Optional[str] = Query(None),
    session: AsyncSession = Depends(get_db),
    gateway: SharingGateway = Depends(get_sharing_gateway),
):
    """Serve the frozen snapshot. Denials never say which check failed."""
    try:
        share = await gateway.view(
            session,
            token,
            password=password,
            email=email,
            ip_address=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent"),
        )
    except ShareNotFoundError:
        raise HTTPException(status_code=404, detail="Shared report not found")
    except ShareAccessDeniedError:
        raise HTTPException(status_code=403, detail=ACCESS_DENIED)

    return StandardResponse(data=SharedReportView(
        report_name=share.report_name,
        share_message=share.share_message,
        expiration_date=share.expiration_date,
        view_count=share.view_count,
        report_data=share.report_snapshot,
    ))
