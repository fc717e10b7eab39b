from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import contextlib
import logging

from jobtracker.core.config import settings
from jobtracker.core.database import engine, get_async_db, Base
from jobtracker.reporting.templates import seed_templates
from jobtracker.web.routers import register_routers

# Import models so their tables are registered on Base.metadata
import jobtracker.jobs.database  # noqa: F401
import jobtracker.reporting.database  # noqa: F401
import jobtracker.sharing.database  # noqa: F401

logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))

    # Initialize Database Tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    if settings.seed_templates_on_startup:
        async with get_async_db() as session:
            await seed_templates(session)

    yield

    await engine.dispose()


app = FastAPI(
    title="Job Tracker Reports",
    description="Job search analytics, AI insights, exports and shareable report links",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Reporting", "description": "Report configurations, generation and export"},
        {"name": "Sharing", "description": "Create, list and revoke shared report links"},
        {"name": "Public", "description": "Unauthenticated access to shared report snapshots"},
    ]
)

register_routers(app)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://127.0.0.1:5173"],  # Vite Dev Server
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", include_in_schema=False)
async def health():
    return {"status": "ok", "environment": settings.environment}
