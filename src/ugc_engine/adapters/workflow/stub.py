"""Stub job service for testing and offline use."""

from collections.abc import Sequence
from uuid import uuid4

from ugc_engine.adapters.workflow.base import (
    FINISHED_STATUS,
    AccessGrant,
    JobAccepted,
    JobService,
    JobStatusUpdate,
)
from ugc_engine.domain.errors import AuthorizationError, QuotaExceededError
from ugc_engine.domain.models import AdBrief
from ugc_engine.logging import get_logger

logger = get_logger(__name__)


class StubJobService(JobService):
    """Job service that simulates the workflow without network calls.

    Each job walks through `statuses` one poll at a time and then stays on the
    last one. Polls beyond the script keep returning the final status.
    """

    def __init__(
        self,
        password: str = "stub",
        admin_password: str | None = None,
        quota: int = 2,
        statuses: Sequence[str] = ("Ready", FINISHED_STATUS),
        video_url_template: str = "https://stub.local/videos/{job_id}.mp4",
    ) -> None:
        self.password = password
        self.admin_password = admin_password
        self.remaining = quota
        self.statuses = list(statuses)
        self.video_url_template = video_url_template
        self.submitted: list[AdBrief] = []
        self.poll_counts: dict[str, int] = {}
        self._briefs: dict[str, AdBrief] = {}

    @property
    def name(self) -> str:
        return "stub"

    def _authorize(self, credential: str) -> bool:
        if self.admin_password and credential == self.admin_password:
            return True
        if credential != self.password:
            raise AuthorizationError("Wrong password")
        return False

    async def submit(self, brief: AdBrief, credential: str) -> JobAccepted:
        is_admin = self._authorize(credential)
        if not is_admin:
            if self.remaining <= 0:
                raise QuotaExceededError("Request limit reached")
            self.remaining -= 1

        job_id = f"stub-{uuid4().hex[:12]}"
        self.submitted.append(brief)
        self._briefs[job_id] = brief
        self.poll_counts[job_id] = 0
        logger.info("stub_job_submitted", job_id=job_id, product=brief.product[:50])

        return JobAccepted(
            job_id=job_id,
            status="queued",
            message="Job queued",
            remaining=None if is_admin else self.remaining,
            is_admin=is_admin,
        )

    async def poll(self, job_id: str) -> JobStatusUpdate:
        count = self.poll_counts.get(job_id, 0)
        self.poll_counts[job_id] = count + 1
        status = self.statuses[min(count, len(self.statuses) - 1)] if self.statuses else "Ready"
        brief = self._briefs.get(job_id)

        return JobStatusUpdate(
            job_id=job_id,
            status=status,
            video_url=(
                self.video_url_template.format(job_id=job_id) if status == FINISHED_STATUS else None
            ),
            product=brief.product if brief else None,
            model=brief.model.value if brief else None,
        )

    async def validate(self, credential: str) -> AccessGrant:
        is_admin = self._authorize(credential)
        return AccessGrant(is_admin=is_admin, remaining_quota=None if is_admin else self.remaining)
