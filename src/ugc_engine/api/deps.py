"""FastAPI dependencies."""

from typing import Annotated

import httpx
from fastapi import Depends, Request

from ugc_engine.config import Settings, get_settings
from ugc_engine.services.rate_limit import FixedWindowRateLimiter

SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_rate_limiter(request: Request) -> FixedWindowRateLimiter:
    """Get the app-wide rate limiter created at startup."""
    return request.app.state.rate_limiter


def get_webhook_client(request: Request) -> httpx.AsyncClient:
    """Get the shared HTTP client used to reach the workflow webhook."""
    return request.app.state.http_client


RateLimiterDep = Annotated[FixedWindowRateLimiter, Depends(get_rate_limiter)]
WebhookClientDep = Annotated[httpx.AsyncClient, Depends(get_webhook_client)]
