"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ugc_engine import __version__
from ugc_engine.api.routes import briefs, health, ugc
from ugc_engine.config import settings
from ugc_engine.logging import get_logger, setup_logging
from ugc_engine.services.rate_limit import FixedWindowRateLimiter

# Setup logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    logger.info("application_starting", version=__version__)

    if not settings.webhook_url:
        logger.warning("webhook_url_missing")

    app.state.rate_limiter = FixedWindowRateLimiter(
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )
    async with httpx.AsyncClient(timeout=settings.webhook_timeout_seconds) as client:
        app.state.http_client = client
        yield

    logger.info("application_shutting_down")


app = FastAPI(
    title="UGC Engine",
    description="Prompt scoring, progression and workflow proxy for UGC ad videos",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(ugc.router)
app.include_router(briefs.router, prefix="/api/v1")


@app.get("/", include_in_schema=False)
async def root() -> dict[str, str]:
    """Root endpoint redirect to docs."""
    return {
        "name": "UGC Engine",
        "version": __version__,
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "ugc_engine.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
