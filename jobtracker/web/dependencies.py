"""Shared dependencies for Job Tracker API routers."""

import secrets
import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from jobtracker.core.ai_client import LLMTextGenerator, TextGenerator
from jobtracker.core.config import settings
from jobtracker.reporting.insights import InsightOrchestrator
from jobtracker.reporting.service import ReportService
from jobtracker.sharing.service import SharingGateway

logger = logging.getLogger(__name__)

security = HTTPBasic()


# --- Auth ---

def get_current_user_id(credentials: HTTPBasicCredentials = Depends(security)) -> str:
    """
    Authenticate via HTTP Basic Auth. The username is the owner id.
    When api_username is configured only that user is accepted.
    """
    is_correct_username = True
    if settings.api_username:
        is_correct_username = secrets.compare_digest(
            credentials.username.encode("utf8"), settings.api_username.encode("utf8")
        )

    is_correct_password = secrets.compare_digest(
        credentials.password.encode("utf8"), settings.api_password.encode("utf8")
    )

    if not (credentials.username and is_correct_username and is_correct_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Basic"},
        )
    return credentials.username


# --- Services ---

def get_text_generator() -> TextGenerator:
    return LLMTextGenerator()


def get_report_service(text_generator: TextGenerator = Depends(get_text_generator)) -> ReportService:
    orchestrator = InsightOrchestrator(text_generator, timeout=settings.insight_timeout_seconds)
    return ReportService(insights=orchestrator)


def get_sharing_gateway(report_service: ReportService = Depends(get_report_service)) -> SharingGateway:
    return SharingGateway(report_service)
