"""Job service adapters for the external generation workflow."""

from ugc_engine.adapters.workflow.base import (
    FINISHED_STATUS,
    AccessGrant,
    JobAccepted,
    JobService,
    JobStatusUpdate,
)
from ugc_engine.adapters.workflow.stub import StubJobService
from ugc_engine.adapters.workflow.webhook import WebhookJobService

__all__ = [
    "FINISHED_STATUS",
    "AccessGrant",
    "JobAccepted",
    "JobService",
    "JobStatusUpdate",
    "StubJobService",
    "WebhookJobService",
]
