"""Domain models.

Models that cross a process boundary (the brief sent to the webhook, the
persisted stats snapshot and job history) are pydantic models serialized with
camelCase keys. Derived values that are only ever computed are dataclasses.
"""

from dataclasses import dataclass
from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from ugc_engine.domain.enums import BadgeId, BadgeTier, JobState, ModelId, ModelSpeed
from ugc_engine.utils.numbers import round_half_up

MAX_LEVEL = 10


class CamelModel(BaseModel):
    """Base model serialized with camelCase field names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class AdBrief(CamelModel):
    """Structured creative input describing the ad to generate.

    Every text field defaults to an empty string so that drafts can be scored
    while they are being written; completeness is checked at submission.
    """

    model_config = ConfigDict(frozen=True)

    product: str = ""
    product_photo_url: str = ""
    target_audience: str = Field(
        default="",
        validation_alias=AliasChoices("targetAudience", "target_audience", "icp"),
        serialization_alias="targetAudience",
    )
    product_features: str = ""
    video_setting: str = ""
    model: ModelId = ModelId.NANO_VEO

    @property
    def feature_list(self) -> list[str]:
        """Features split on commas/semicolons, stripped, empties dropped."""
        parts = self.product_features.replace(";", ",").split(",")
        return [part.strip() for part in parts if part.strip()]


class UserStats(CamelModel):
    """Running statistics for the local user.

    Mutated only by the stats aggregator, once per completed job.
    """

    total_videos: int = Field(default=0, ge=0)
    high_quality_count: int = Field(default=0, ge=0)
    over90_count: int = Field(default=0, ge=0, alias="over90Count")
    avg_quality: int = Field(default=0, ge=0, le=100)
    streak: int = Field(default=0, ge=0)
    xp: int = Field(default=0, ge=0)
    level: int = Field(default=1, ge=1, le=MAX_LEVEL)
    prompt_scores: list[int] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_consistency(self) -> "UserStats":
        if len(self.prompt_scores) != self.total_videos:
            raise ValueError("promptScores length must equal totalVideos")
        if self.high_quality_count > self.total_videos:
            raise ValueError("highQualityCount cannot exceed totalVideos")
        if self.over90_count > self.total_videos:
            raise ValueError("over90Count cannot exceed totalVideos")
        if any(score < 0 or score > 100 for score in self.prompt_scores):
            raise ValueError("promptScores must be within 0-100")
        expected_avg = (
            round_half_up(sum(self.prompt_scores) / len(self.prompt_scores))
            if self.prompt_scores
            else 0
        )
        if self.avg_quality != expected_avg:
            raise ValueError("avgQuality does not match promptScores")
        return self


class Job(CamelModel):
    """A generation job as archived in the local history."""

    id: str
    brief: AdBrief = Field(validation_alias=AliasChoices("brief", "input"))
    state: JobState
    video_url: str | None = None
    quality_score: int | None = None
    created_at: datetime
    completed_at: datetime | None = None


@dataclass(frozen=True)
class ModelOption:
    """Catalogue entry for a generation model."""

    id: ModelId
    name: str
    description: str
    speed: ModelSpeed
    quality: int  # 1-5
    xp_multiplier: float


MODELS: tuple[ModelOption, ...] = (
    ModelOption(
        id=ModelId.NANO_VEO,
        name="Nano + Veo",
        description="NanoBanana image generation + Veo video. Highest quality.",
        speed=ModelSpeed.BALANCED,
        quality=5,
        xp_multiplier=1.2,
    ),
    ModelOption(
        id=ModelId.SORA_2,
        name="Sora 2",
        description="OpenAI Sora image-to-video. Premium cinematic style.",
        speed=ModelSpeed.PREMIUM,
        quality=5,
        xp_multiplier=1.5,
    ),
)


def get_model_option(model_id: ModelId | str) -> ModelOption | None:
    """Look up a model in the catalogue."""
    for option in MODELS:
        if option.id == model_id:
            return option
    return None


@dataclass(frozen=True)
class Badge:
    """A badge together with whether the current stats earn it."""

    id: BadgeId
    name: str
    description: str
    icon: str
    tier: BadgeTier
    earned: bool = False


@dataclass(frozen=True)
class LevelInfo:
    """Position of an XP total on the level curve."""

    level: int
    current_xp: int
    next_level_xp: int
    is_max_level: bool = False

    @property
    def progress_percent(self) -> int:
        if self.is_max_level:
            return 100
        if self.next_level_xp <= 0:
            return 0
        return round_half_up(self.current_xp / self.next_level_xp * 100)
