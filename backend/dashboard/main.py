"""
Dashboard FastAPI Application Entry Point.

Run with: uvicorn dashboard.main:app --port 8080 --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dashboard.config import configure_logging, get_settings
from dashboard.api.routes import assistant, data, journal, spa, study
from dashboard.db.store import document_store
from dashboard.schemas.sync import HealthResponse
from dashboard.services.documents import now_iso

logger = logging.getLogger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup/shutdown."""
    # Startup
    configure_logging(settings)
    document_store.ensure_data_dir()
    logger.info("Data directory: %s", document_store.data_dir.resolve())
    yield
    # Shutdown


app = FastAPI(
    title=settings.app_name,
    description="Personal productivity dashboard API",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="ok", timestamp=now_iso())


# Include routers (SPA fallback last: it matches every GET path)
app.include_router(data.router)
app.include_router(journal.router)
app.include_router(study.router)
app.include_router(assistant.router)
app.include_router(spa.router)
