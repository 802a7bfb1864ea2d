"""
FastAPI application factory and API package.

Run with:
    uvicorn precision_engine.api:app --reload --port 8000

Or via main.py:
    python -m precision_engine --serve
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from precision_engine.config import Settings, get_settings
from precision_engine.api.routes import health_router, validation_router
from precision_engine.engine import PrecisionEngine

logger = logging.getLogger(__name__)


def create_app(engine: PrecisionEngine | None = None, settings: Settings | None = None) -> FastAPI:
    """Application factory — one engine per app instance."""
    settings = settings or get_settings()
    engine = engine or PrecisionEngine(settings)

    application = FastAPI(
        title=f"{settings.app_name} API",
        description="Validation, quality scoring and auto-fix advice for capability/enabler documents",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    application.state.engine = engine

    # Editor UI calls from another origin
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(health_router, tags=["Health"])
    application.include_router(validation_router, prefix="/api/validation", tags=["Validation"])

    @application.on_event("shutdown")
    async def _close_engine():
        engine.close()

    logger.info(
        f"{settings.app_name} API ready "
        f"(validations={settings.max_concurrent_validations}, checks={settings.max_concurrent_checks})"
    )
    return application


# Module-level instance for `uvicorn precision_engine.api:app`
app = create_app()
