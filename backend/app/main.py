"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
from datetime import datetime

from fastapi import FastAPI

from app.api.routes import api_router
from app.core.logging import setup_logging
from app.core.telemetry import setup_telemetry
from modus.config import get_settings
from modus.yahoo import get_yahoo_client

logger = logging.getLogger(__name__)

settings = get_settings()
app = FastAPI(title=settings.app_name, version="0.1.0")
setup_logging(settings.log_level)
setup_telemetry(app, settings)

ENDPOINTS = ["/equities/returns", "/options/bs", "/options/kelly", "/options/mc"]


@app.on_event("startup")
async def startup() -> None:
    logger.info("Starting %s with settings %s", settings.app_name, settings.dict_for_logging())


@app.on_event("shutdown")
async def shutdown() -> None:
    """Ensure the quote provider client is closed when the service stops."""

    await get_yahoo_client().aclose()


@app.get("/", tags=["health"])
async def index() -> dict[str, list[str]]:
    """List the available endpoints."""

    return {"endpoints": ENDPOINTS}


@app.get("/health", tags=["health"])
async def health() -> dict[str, str]:
    """Return service readiness metadata."""

    return {
        "status": "ok",
        "timestamp": datetime.now().isoformat(),
    }


def configure_app() -> FastAPI:
    """Attach routes."""

    app.include_router(api_router)
    return app


configure_app()

__all__ = ["app", "configure_app"]
