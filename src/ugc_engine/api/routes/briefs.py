"""Brief scoring and progression endpoints."""

from fastapi import APIRouter, Query
from pydantic import BaseModel

from ugc_engine.domain.enums import ModelId
from ugc_engine.domain.models import MODELS, AdBrief
from ugc_engine.services.progression import level_from_xp
from ugc_engine.services.scoring import score_breakdown

router = APIRouter(tags=["Briefs"])


class ScoreComponents(BaseModel):
    """Points contributed by each scoring signal."""

    length: int
    details: int
    audience: int
    features: int
    setting: int


class ScoreResponse(BaseModel):
    """Quality score of a brief."""

    total: int
    label: str
    components: ScoreComponents
    matched_keywords: list[str]


class ModelResponse(BaseModel):
    """Catalogue entry for a generation model."""

    id: ModelId
    name: str
    description: str
    speed: str
    quality: int
    xp_multiplier: float


class LevelResponse(BaseModel):
    """Level curve position for an XP total."""

    xp: int
    level: int
    current_xp: int
    next_level_xp: int
    is_max_level: bool
    progress_percent: int


@router.post(
    "/briefs/score",
    response_model=ScoreResponse,
    summary="Score a brief",
    description="Return the 0-100 quality score of a brief with its breakdown.",
)
async def score_brief_endpoint(brief: AdBrief) -> ScoreResponse:
    result = score_breakdown(brief)
    return ScoreResponse(
        total=result.total,
        label=result.label,
        components=ScoreComponents(
            length=result.length,
            details=result.details,
            audience=result.audience,
            features=result.features,
            setting=result.setting,
        ),
        matched_keywords=list(result.matched_keywords),
    )


@router.get(
    "/models",
    response_model=list[ModelResponse],
    summary="List generation models",
)
async def list_models() -> list[ModelResponse]:
    return [
        ModelResponse(
            id=option.id,
            name=option.name,
            description=option.description,
            speed=option.speed.value,
            quality=option.quality,
            xp_multiplier=option.xp_multiplier,
        )
        for option in MODELS
    ]


@router.get(
    "/progress/level",
    response_model=LevelResponse,
    summary="Level for an XP total",
)
async def get_level(xp: int = Query(..., ge=0, description="Cumulative XP")) -> LevelResponse:
    info = level_from_xp(xp)
    return LevelResponse(
        xp=xp,
        level=info.level,
        current_xp=info.current_xp,
        next_level_xp=info.next_level_xp,
        is_max_level=info.is_max_level,
        progress_percent=info.progress_percent,
    )
