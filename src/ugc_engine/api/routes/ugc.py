"""Proxy route forwarding job requests to the workflow webhook."""

import math

import httpx
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ugc_engine.api.deps import RateLimiterDep, SettingsDep, WebhookClientDep
from ugc_engine.logging import get_logger

router = APIRouter(tags=["Jobs"])
logger = get_logger(__name__)


def client_identity(request: Request) -> str:
    """Identify the caller for rate limiting.

    Uses the first X-Forwarded-For entry when behind a proxy, then the
    socket peer address.
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


@router.post(
    "/api/ugc",
    summary="Workflow proxy",
    description=(
        "Forward a start/status/validate request to the workflow webhook. "
        "The upstream JSON body and status code are returned unchanged."
    ),
)
async def proxy_ugc(
    request: Request,
    limiter: RateLimiterDep,
    client: WebhookClientDep,
    app_settings: SettingsDep,
) -> JSONResponse:
    """Forward the request body to the webhook with the shared secret."""
    identity = client_identity(request)
    if not limiter.check_and_consume(identity):
        retry_after = math.ceil(limiter.retry_after(identity))
        return JSONResponse(
            {"error": "Too many requests"},
            status_code=429,
            headers={"Retry-After": str(retry_after)},
        )

    if not app_settings.webhook_url:
        logger.error("webhook_not_configured")
        return JSONResponse({"error": "WEBHOOK_URL not configured"}, status_code=500)

    try:
        body = await request.json()
    except ValueError:
        return JSONResponse({"error": "Invalid JSON body"}, status_code=400)

    action = body.get("action") if isinstance(body, dict) else None

    try:
        upstream = await client.post(
            app_settings.webhook_url,
            json=body,
            headers={"x-webhook-secret": app_settings.webhook_secret},
            timeout=app_settings.webhook_timeout_seconds,
        )
        data = upstream.json() if upstream.content else {}
    except (httpx.HTTPError, ValueError) as e:
        logger.error("webhook_proxy_failed", action=action, error=str(e))
        return JSONResponse({"error": "Failed to reach workflow webhook"}, status_code=502)

    logger.info("webhook_proxied", action=action, status_code=upstream.status_code)
    return JSONResponse(data, status_code=upstream.status_code)
