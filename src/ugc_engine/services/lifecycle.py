"""Client-side lifecycle of a generation job.

The controller is an explicit state machine::

    IDLE --submit--> SUBMITTING --accepted--> PROCESSING --Finished--> COMPLETED
                         |                        |
                         +--upstream error--> FAILED
    any state --reset--> IDLE

While PROCESSING it owns a single asyncio task that polls the job service at
a fixed interval. Poll errors are logged and retried on the next tick; only a
"Finished" status carrying a video URL ends polling. Stats and history are
updated exactly once per job, after that terminal response.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from ugc_engine.adapters.workflow.base import AccessGrant, JobService, JobStatusUpdate
from ugc_engine.adapters.workflow.stub import StubJobService
from ugc_engine.adapters.workflow.webhook import WebhookJobService
from ugc_engine.config import settings
from ugc_engine.domain.enums import JobState
from ugc_engine.domain.errors import (
    AuthorizationError,
    BriefValidationError,
    JobServiceError,
    QuotaExceededError,
)
from ugc_engine.domain.models import AdBrief, Badge, Job, LevelInfo, UserStats
from ugc_engine.logging import bind_job_context, get_logger
from ugc_engine.services.progression import evaluate_badges, level_from_xp, newly_earned_badges
from ugc_engine.services.scoring import PromptScore, score_breakdown, score_brief
from ugc_engine.services.stats import StatsAggregator
from ugc_engine.services.store import ProgressRepository

logger = get_logger(__name__)

QUOTA_MESSAGE = "You've used all your free generations. Contact us for more access."
WRONG_PASSWORD_MESSAGE = "Wrong password. Please try again."
MISSING_PASSWORD_MESSAGE = "Enter the access password to generate videos."
RECORD_FAILED_MESSAGE = "Your video is ready, but your progress could not be saved."


def get_job_service() -> JobService:
    """Get the configured job service."""
    provider = getattr(settings, "job_service_provider", "webhook").lower()

    if provider == "stub":
        return StubJobService()
    else:
        return WebhookJobService(
            base_url=settings.api_base_url,
            timeout=settings.webhook_timeout_seconds,
        )


def validate_brief(brief: AdBrief) -> None:
    """Raise BriefValidationError unless the brief can be submitted."""
    missing = []
    if not brief.product.strip():
        missing.append("product")
    if not brief.product_photo_url.strip():
        missing.append("product photo URL")
    if missing:
        raise BriefValidationError(f"Missing required field(s): {', '.join(missing)}")


@dataclass
class AccessSession:
    """Credential and quota state of the current user."""

    credential: str | None = None
    authenticated: bool = False
    is_admin: bool = False
    remaining: int = 2
    auth_error: str | None = None

    @property
    def has_quota(self) -> bool:
        return self.is_admin or self.remaining > 0


@dataclass(frozen=True)
class CompletionEvent:
    """Published to listeners when a job completes."""

    job: Job
    stats: UserStats
    xp_gained: int
    leveled_up: bool
    new_badges: list[Badge] = field(default_factory=list)


@dataclass(frozen=True)
class _ActiveJob:
    job_id: str
    brief: AdBrief
    score: int
    created_at: datetime


CompletionListener = Callable[[CompletionEvent], None]


class JobLifecycleController:
    """Submits one job at a time and tracks it until it completes.

    Args:
        service: Job service to submit to and poll
        repository: Durable store for stats, history and the credential
        poll_interval: Seconds between polls (defaults to settings)
        default_quota: Quota assumed until the service reports one
        clock: Source of timestamps for job records
    """

    def __init__(
        self,
        service: JobService,
        repository: ProgressRepository,
        poll_interval: float | None = None,
        default_quota: int | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.service = service
        self.repository = repository
        self.aggregator = StatsAggregator(repository)
        self.poll_interval = (
            settings.poll_interval_seconds if poll_interval is None else poll_interval
        )
        self.default_quota = settings.default_quota if default_quota is None else default_quota
        self._clock = clock or (lambda: datetime.now(UTC))

        self.session = AccessSession(remaining=self.default_quota)
        self.stats: UserStats = repository.load_stats()
        self.history: list[Job] = repository.load_history()
        self.video_url: str | None = None
        self.error: str | None = None
        self.last_score: int | None = None

        self._state = JobState.IDLE
        self._job_id: str | None = None
        self._active: _ActiveJob | None = None
        self._poll_task: asyncio.Task[None] | None = None
        # Bumped by every submit and reset; a submit whose token is stale drops its result
        self._generation = 0
        self._listeners: list[CompletionListener] = []
        self._closed = False

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def state(self) -> JobState:
        return self._state

    @property
    def job_id(self) -> str | None:
        return self._job_id

    @property
    def is_polling(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    @property
    def level_info(self) -> LevelInfo:
        return level_from_xp(self.stats.xp)

    @property
    def badges(self) -> list[Badge]:
        return evaluate_badges(self.stats)

    def preview_score(self, brief: AdBrief) -> PromptScore:
        """Live quality feedback for a draft brief."""
        return score_breakdown(brief)

    def can_submit(self, brief: AdBrief) -> bool:
        return (
            self._state is JobState.IDLE
            and bool(brief.product.strip())
            and bool(brief.product_photo_url.strip())
            and self.session.authenticated
            and self.session.has_quota
        )

    def add_listener(self, listener: CompletionListener) -> None:
        self._listeners.append(listener)

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    async def authenticate(self, credential: str) -> bool:
        """Validate a credential and cache it on success."""
        if not credential.strip():
            self.session.auth_error = MISSING_PASSWORD_MESSAGE
            return False

        try:
            grant = await self.service.validate(credential)
        except AuthorizationError as e:
            self.session = AccessSession(
                remaining=self.default_quota,
                auth_error=str(e) or "Invalid password",
            )
            return False
        except JobServiceError as e:
            self.session.auth_error = str(e)
            return False

        self._grant(credential, grant)
        return True

    async def restore_session(self) -> bool:
        """Re-validate the cached credential, dropping it if it was rejected."""
        credential = self.repository.load_credential()
        if not credential:
            return False

        try:
            grant = await self.service.validate(credential)
        except AuthorizationError:
            logger.info("cached_credential_rejected")
            self.sign_out()
            return False
        except JobServiceError as e:
            self.session.auth_error = str(e)
            return False

        self._grant(credential, grant)
        return True

    def sign_out(self, message: str | None = None) -> None:
        self.session = AccessSession(remaining=self.default_quota, auth_error=message)
        self.repository.clear_credential()

    def _grant(self, credential: str, grant: AccessGrant) -> None:
        self.session = AccessSession(
            credential=credential,
            authenticated=True,
            is_admin=grant.is_admin,
            remaining=self.default_quota,
        )
        if grant.remaining_quota is not None and grant.remaining_quota >= 0:
            self.session.remaining = grant.remaining_quota
        self.repository.save_credential(credential)

        logger.info(
            "session_authenticated",
            is_admin=self.session.is_admin,
            remaining=self.session.remaining,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def submit(self, brief: AdBrief) -> JobState:
        """Submit a brief and start polling. Returns the resulting state."""
        if self._closed:
            raise RuntimeError("Controller is closed")
        if self._state is not JobState.IDLE:
            logger.warning("submit_ignored", state=self._state.value)
            return self._state

        self.error = None
        try:
            validate_brief(brief)
        except BriefValidationError as e:
            self.error = str(e)
            return self._state

        credential = self.session.credential
        if not self.session.authenticated or not credential:
            self.session.auth_error = MISSING_PASSWORD_MESSAGE
            return self._state

        if not self.session.has_quota:
            self.error = QUOTA_MESSAGE
            logger.info("submit_blocked_quota")
            return self._state

        # Scored now; completion reuses this value
        score = score_brief(brief)
        self.last_score = score
        self._generation += 1
        generation = self._generation
        self._state = JobState.SUBMITTING
        logger.info("job_submitting", product=brief.product[:50], model=brief.model.value, score=score)

        try:
            accepted = await self.service.submit(brief, credential)
        except JobServiceError as e:
            if self._is_current(generation):
                self._reject_submission(e)
            else:
                logger.info("submit_error_after_reset", error=str(e))
            return self._state

        if not self._is_current(generation):
            logger.info("job_accepted_after_reset", job_id=accepted.job_id)
            return self._state

        if accepted.is_admin:
            self.session.is_admin = True
        if accepted.remaining is not None and accepted.remaining >= 0:
            self.session.remaining = accepted.remaining

        self._job_id = accepted.job_id
        self._active = _ActiveJob(
            job_id=accepted.job_id,
            brief=brief,
            score=score,
            created_at=self._clock(),
        )
        self._state = JobState.PROCESSING
        logger.info("job_processing", job_id=accepted.job_id)
        self._start_polling(accepted.job_id)
        return self._state

    def _is_current(self, generation: int) -> bool:
        return (
            generation == self._generation
            and self._state is JobState.SUBMITTING
            and not self._closed
        )

    def _reject_submission(self, error: JobServiceError) -> None:
        if isinstance(error, AuthorizationError):
            self.sign_out(WRONG_PASSWORD_MESSAGE)
            self._state = JobState.IDLE
        elif isinstance(error, QuotaExceededError):
            self.session.remaining = 0
            self.error = str(error) or QUOTA_MESSAGE
            self._state = JobState.IDLE
        else:
            logger.error("job_submit_failed", error=str(error))
            self.error = str(error) or "Failed to start job"
            self._state = JobState.FAILED

    def reset(self) -> None:
        """Return to IDLE from any state, abandoning the current job."""
        self._generation += 1
        self._stop_polling()
        if self._job_id:
            logger.info("job_reset", job_id=self._job_id, state=self._state.value)
        self._state = JobState.IDLE
        self._job_id = None
        self._active = None
        self.video_url = None
        self.error = None

    async def wait(self, timeout: float | None = None) -> JobState:
        """Wait until polling stops (or `timeout` elapses) and return the state."""
        task = self._poll_task
        if task is not None:
            await asyncio.wait({task}, timeout=timeout)
        return self._state

    async def aclose(self) -> None:
        """Stop polling. Late results are ignored afterwards."""
        self._closed = True
        self._generation += 1
        task = self._poll_task
        self._stop_polling()
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)

    async def __aenter__(self) -> "JobLifecycleController":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    def _is_processing(self, job_id: str) -> bool:
        return self._state is JobState.PROCESSING and self._job_id == job_id

    def _start_polling(self, job_id: str) -> None:
        self._stop_polling()
        self._poll_task = asyncio.get_running_loop().create_task(
            self._poll_loop(job_id),
            name=f"poll-{job_id}",
        )

    def _stop_polling(self) -> None:
        task = self._poll_task
        self._poll_task = None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    async def _poll_loop(self, job_id: str) -> None:
        # Bound in this task's context only
        bind_job_context(job_id=job_id)
        attempt = 0
        while self._is_processing(job_id):
            await asyncio.sleep(self.poll_interval)
            attempt += 1

            try:
                update = await self.service.poll(job_id)
            except JobServiceError as e:
                logger.warning("job_poll_error", job_id=job_id, attempt=attempt, error=str(e))
                continue

            logger.debug("job_poll_status", job_id=job_id, status=update.status, attempt=attempt)

            if update.is_finished:
                self._complete(job_id, update)
                return

    def _complete(self, job_id: str, update: JobStatusUpdate) -> None:
        if not self._is_processing(job_id) or self._active is None:
            logger.info("stale_completion_ignored", job_id=job_id)
            return

        # Stop the timer first so a duplicate terminal response cannot count twice
        self._stop_polling()

        active = self._active
        self._active = None
        self._state = JobState.COMPLETED
        self.video_url = update.video_url

        job = Job(
            id=job_id,
            brief=active.brief,
            state=JobState.COMPLETED,
            video_url=update.video_url,
            quality_score=active.score,
            created_at=active.created_at,
            completed_at=self._clock(),
        )

        before = self.stats
        try:
            self.stats = self.aggregator.apply_completion(before, active.score, active.brief.model)
            self.history = self.repository.save_history([job, *self.history])
        except Exception:
            # In-memory stats and history keep mirroring what was persisted
            logger.exception("job_record_failed", job_id=job_id)
            self.error = RECORD_FAILED_MESSAGE

        event = CompletionEvent(
            job=job,
            stats=self.stats,
            xp_gained=self.stats.xp - before.xp,
            leveled_up=self.stats.level > before.level,
            new_badges=newly_earned_badges(before, self.stats),
        )
        logger.info(
            "job_completed",
            job_id=job_id,
            score=active.score,
            xp_gained=event.xp_gained,
            level=self.stats.level,
        )

        for listener in self._listeners:
            try:
                listener(event)
            except Exception:
                logger.exception("completion_listener_failed", job_id=job_id)
