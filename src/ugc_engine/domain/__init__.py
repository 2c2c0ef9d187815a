"""Domain models and enumerations."""

from ugc_engine.domain.enums import BadgeId, BadgeTier, JobState, ModelId, ModelSpeed
from ugc_engine.domain.errors import (
    AuthorizationError,
    BriefValidationError,
    JobServiceError,
    MalformedResponse,
    QuotaExceededError,
    TransientNetworkError,
    UGCEngineError,
    UpstreamUnavailable,
)
from ugc_engine.domain.models import (
    MAX_LEVEL,
    MODELS,
    AdBrief,
    Badge,
    Job,
    LevelInfo,
    ModelOption,
    UserStats,
    get_model_option,
)

__all__ = [
    "MAX_LEVEL",
    "MODELS",
    "AdBrief",
    "AuthorizationError",
    "Badge",
    "BadgeId",
    "BadgeTier",
    "BriefValidationError",
    "Job",
    "JobServiceError",
    "JobState",
    "LevelInfo",
    "MalformedResponse",
    "ModelId",
    "ModelOption",
    "ModelSpeed",
    "QuotaExceededError",
    "TransientNetworkError",
    "UGCEngineError",
    "UpstreamUnavailable",
    "UserStats",
    "get_model_option",
]
