"""Tests for the HTTP job service client."""

import json

import httpx
import pytest

from ugc_engine.adapters.workflow.webhook import WebhookJobService
from ugc_engine.domain.errors import (
    AuthorizationError,
    MalformedResponse,
    QuotaExceededError,
    TransientNetworkError,
    UpstreamUnavailable,
)
from ugc_engine.domain.models import AdBrief

BASE_URL = "http://proxy.test"


def make_service(handler) -> WebhookJobService:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return WebhookJobService(base_url=BASE_URL, client=client)


def respond(status_code: int, body: object = None, content: bytes | None = None):
    """Build a handler that records requests and returns a fixed response."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if content is not None:
            return httpx.Response(status_code, content=content)
        return httpx.Response(status_code, json=body)

    handler.seen = seen
    return handler


@pytest.mark.asyncio
async def test_submit_posts_start_action(energy_drink_brief: AdBrief) -> None:
    handler = respond(200, {"jobId": "job-42", "status": "queued", "remaining": 1})
    service = make_service(handler)

    accepted = await service.submit(energy_drink_brief, "letmein")

    assert accepted.job_id == "job-42"
    assert accepted.remaining == 1
    [request] = handler.seen
    assert str(request.url) == f"{BASE_URL}/api/ugc"
    payload = json.loads(request.content)
    assert payload["action"] == "start"
    assert payload["password"] == "letmein"
    assert payload["product"] == "Energy Drink"
    assert payload["targetAudience"] == energy_drink_brief.target_audience
    assert payload["icp"] == energy_drink_brief.target_audience
    assert payload["productPhotoUrl"] == energy_drink_brief.product_photo_url
    assert payload["model"] == "Nano + Veo 3.1"


@pytest.mark.asyncio
async def test_poll_decodes_status() -> None:
    handler = respond(
        200,
        {"jobId": "job-42", "status": "Finished", "videoUrl": "https://cdn.test/v.mp4"},
    )
    service = make_service(handler)

    update = await service.poll("job-42")

    assert update.is_finished is True
    assert update.video_url == "https://cdn.test/v.mp4"
    assert json.loads(handler.seen[0].content) == {"action": "status", "jobId": "job-42"}


@pytest.mark.asyncio
async def test_finished_without_url_is_not_terminal() -> None:
    service = make_service(respond(200, {"status": "Finished"}))

    update = await service.poll("job-42")

    assert update.is_finished is False


@pytest.mark.asyncio
async def test_validate_reads_quota() -> None:
    service = make_service(respond(200, {"isAdmin": False, "remaining": 2}))

    grant = await service.validate("letmein")

    assert grant.is_admin is False
    assert grant.remaining_quota == 2


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status_code", "body", "error"),
    [
        (401, {"error": "Wrong password"}, AuthorizationError),
        (403, {"error": "Forbidden"}, AuthorizationError),
        (400, {"error": "Wrong password"}, AuthorizationError),
        (429, {"error": "Too many requests"}, QuotaExceededError),
        (403, {"error": "Request limit reached"}, AuthorizationError),
        (400, {"error": "Request limit reached"}, QuotaExceededError),
        (500, {"error": "Workflow crashed"}, UpstreamUnavailable),
        (502, {"error": "Failed to reach workflow webhook"}, UpstreamUnavailable),
    ],
)
async def test_error_mapping(status_code: int, body: dict, error: type[Exception]) -> None:
    service = make_service(respond(status_code, body))

    with pytest.raises(error) as exc_info:
        await service.validate("whatever")

    assert str(exc_info.value) == body["error"]


@pytest.mark.asyncio
async def test_error_without_body() -> None:
    service = make_service(respond(503, content=b""))

    with pytest.raises(UpstreamUnavailable, match="HTTP 503"):
        await service.poll("job-1")


@pytest.mark.asyncio
async def test_non_json_success_is_malformed() -> None:
    service = make_service(respond(200, content=b"<html>oops</html>"))

    with pytest.raises(MalformedResponse):
        await service.poll("job-1")


@pytest.mark.asyncio
async def test_missing_job_id_is_malformed(energy_drink_brief: AdBrief) -> None:
    service = make_service(respond(200, {"status": "queued"}))

    with pytest.raises(MalformedResponse):
        await service.submit(energy_drink_brief, "letmein")


@pytest.mark.asyncio
async def test_array_body_is_malformed() -> None:
    service = make_service(respond(200, ["Finished"]))

    with pytest.raises(MalformedResponse):
        await service.poll("job-1")


@pytest.mark.asyncio
async def test_connect_error_is_transient() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    service = make_service(handler)

    with pytest.raises(TransientNetworkError):
        await service.poll("job-1")


@pytest.mark.asyncio
async def test_aclose_keeps_injected_client() -> None:
    client = httpx.AsyncClient(transport=httpx.MockTransport(respond(200, {})))
    service = WebhookJobService(base_url=BASE_URL, client=client)

    await service.aclose()

    assert client.is_closed is False
    await client.aclose()
