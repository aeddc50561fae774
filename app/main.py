"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from app.api import router as api_router
from app.core.config import get_settings
from app.core.logging import get_logger, log_with_context

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    log_with_context(
        logger,
        logging.INFO,
        "Use case document engine starting",
        env=settings.USECASE_ENGINE_ENV,
        fallback_order=",".join(settings.fallback_order),
    )
    yield


app = FastAPI(
    title="Use Case Document Engine",
    description="Use case documents from form data, with prose from a provider fallback chain",
    version="0.1.0",
    lifespan=lifespan,
)


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(content={"status": "ok"}, status_code=200)


app.include_router(api_router, prefix="/api")
