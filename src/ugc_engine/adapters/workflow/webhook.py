"""HTTP job service backed by the `/api/ugc` proxy route."""

from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ugc_engine.adapters.workflow.base import (
    AccessGrant,
    JobAccepted,
    JobService,
    JobStatusUpdate,
)
from ugc_engine.config import settings
from ugc_engine.domain.errors import (
    AuthorizationError,
    MalformedResponse,
    QuotaExceededError,
    TransientNetworkError,
    UpstreamUnavailable,
)
from ugc_engine.domain.models import AdBrief
from ugc_engine.logging import get_logger

logger = get_logger(__name__)

ResponseT = TypeVar("ResponseT", bound=BaseModel)

PROXY_PATH = "/api/ugc"
_QUOTA_MARKERS = ("limit", "quota", "too many requests", "no requests left")


class WebhookJobService(JobService):
    """Job service that posts `action`-tagged JSON bodies to the proxy route.

    Every call is a POST to ``{base_url}/api/ugc``:

    - ``{"action": "start", "password": ..., <brief fields>, "icp": ...}``
    - ``{"action": "status", "jobId": ...}``
    - ``{"action": "validate", "password": ...}``
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    @property
    def name(self) -> str:
        return "webhook"

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def submit(self, brief: AdBrief, credential: str) -> JobAccepted:
        payload = {
            "action": "start",
            "password": credential,
            **brief.model_dump(mode="json", by_alias=True),
            "icp": brief.target_audience,
        }
        accepted = await self._call(payload, JobAccepted)
        logger.info("webhook_job_accepted", job_id=accepted.job_id, model=brief.model.value)
        return accepted

    async def poll(self, job_id: str) -> JobStatusUpdate:
        return await self._call({"action": "status", "jobId": job_id}, JobStatusUpdate)

    async def validate(self, credential: str) -> AccessGrant:
        return await self._call({"action": "validate", "password": credential}, AccessGrant)

    async def _call(self, payload: dict[str, Any], response_model: type[ResponseT]) -> ResponseT:
        action = payload.get("action")
        try:
            response = await self._get_client().post(f"{self.base_url}{PROXY_PATH}", json=payload)
        except httpx.TransportError as e:
            logger.warning("webhook_transport_error", action=action, error=str(e))
            raise TransientNetworkError(f"Could not reach the job service: {e}") from e

        data = self._decode(response)

        if response.is_error:
            raise self._error_for(response.status_code, data)

        try:
            return response_model.model_validate(data)
        except ValidationError as e:
            logger.warning(
                "webhook_malformed_response",
                action=action,
                status_code=response.status_code,
                errors=e.error_count(),
            )
            raise MalformedResponse(f"Unexpected response to '{action}'") from e

    @staticmethod
    def _decode(response: httpx.Response) -> dict[str, Any]:
        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError as e:
            if response.is_error:
                return {}
            raise MalformedResponse("Job service returned a non-JSON body") from e
        if not isinstance(data, dict):
            raise MalformedResponse("Job service returned a non-object body")
        return data

    @staticmethod
    def _error_for(status_code: int, data: dict[str, Any]) -> Exception:
        message = str(data.get("error") or data.get("message") or f"HTTP {status_code}")
        lowered = message.lower()

        if "wrong password" in lowered or status_code in (401, 403):
            return AuthorizationError(message)
        if status_code == 429 or any(marker in lowered for marker in _QUOTA_MARKERS):
            return QuotaExceededError(message)

        logger.warning("webhook_error_response", status_code=status_code, error=message)
        return UpstreamUnavailable(message)

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
