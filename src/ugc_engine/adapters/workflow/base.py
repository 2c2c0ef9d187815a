"""Base interface for the external job service.

The job service accepts a brief, runs the generation asynchronously and is
polled for status. Every call returns one typed success value or raises one
of the `JobServiceError` subclasses from `ugc_engine.domain.errors`.
"""

from abc import ABC, abstractmethod

from pydantic import AliasChoices, Field

from ugc_engine.domain.models import AdBrief, CamelModel

FINISHED_STATUS = "Finished"


class JobAccepted(CamelModel):
    """The job service queued a job."""

    job_id: str = Field(min_length=1)
    status: str = "queued"
    message: str | None = None
    remaining: int | None = None
    is_admin: bool | None = None


class JobStatusUpdate(CamelModel):
    """Status of a queued job as reported by the job service."""

    job_id: str | None = None
    status: str
    video_url: str | None = None
    product: str | None = None
    model: str | None = None

    @property
    def is_finished(self) -> bool:
        """Only "Finished" with a video URL ends polling."""
        return self.status == FINISHED_STATUS and bool(self.video_url)


class AccessGrant(CamelModel):
    """Result of validating a credential."""

    is_admin: bool = False
    remaining_quota: int | None = Field(
        default=None,
        validation_alias=AliasChoices("remainingQuota", "remaining", "remaining_quota"),
    )


class JobService(ABC):
    """Abstract job service.

    Implementations:
    - WebhookJobService: talks to the proxy route over HTTP
    - StubJobService: scripted responses for tests and offline use
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Service name identifier."""
        ...

    @abstractmethod
    async def submit(self, brief: AdBrief, credential: str) -> JobAccepted:
        """Queue a generation job.

        Raises:
            AuthorizationError: credential rejected
            QuotaExceededError: no generations left or throttled
            UpstreamUnavailable: service unreachable or answered garbage
        """
        ...

    @abstractmethod
    async def poll(self, job_id: str) -> JobStatusUpdate:
        """Fetch the current status of a job."""
        ...

    @abstractmethod
    async def validate(self, credential: str) -> AccessGrant:
        """Check a credential and report admin status and remaining quota."""
        ...

    async def aclose(self) -> None:
        """Release any held resources."""
        return None
