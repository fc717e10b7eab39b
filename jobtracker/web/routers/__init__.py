from fastapi import FastAPI

from jobtracker.web.routers.public import router as public_router
from jobtracker.web.routers.reports import router as reports_router
from jobtracker.web.routers.sharing import router as sharing_router


def register_routers(app: FastAPI):
    """Register all routers with the application."""
    app.include_router(sharing_router)
    app.include_router(reports_router)
    app.include_router(public_router)
