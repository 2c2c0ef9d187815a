"""XP, level and badge calculations.

Everything here is a pure function of its inputs. Levels follow a doubling
curve: leaving level 1 costs 100 XP, leaving level 2 another 200, then 400,
800 and so on, up to level 10.
"""

from collections.abc import Callable
from dataclasses import dataclass

from ugc_engine.domain.enums import BadgeId, BadgeTier, ModelId
from ugc_engine.domain.models import MAX_LEVEL, Badge, LevelInfo, UserStats, get_model_option
from ugc_engine.utils.numbers import round_half_up

BASE_LEVEL_XP = 100
DEFAULT_XP_MULTIPLIER = 1.0


def model_multiplier(model: ModelId | str) -> float:
    """XP multiplier of a model; unknown models earn the base rate."""
    option = get_model_option(model)
    return option.xp_multiplier if option else DEFAULT_XP_MULTIPLIER


def xp_gain(quality: int, unit_count: int, model: ModelId | str) -> int:
    """XP earned for `unit_count` videos generated from a prompt of `quality`."""
    return round_half_up(quality * unit_count * model_multiplier(model))


def level_from_xp(xp: int) -> LevelInfo:
    """Place a cumulative XP total on the level curve.

    At the cap the remaining XP keeps counting in ``current_xp`` but there is
    no next threshold, so ``next_level_xp`` is 0 and ``is_max_level`` is set.
    """
    level = 1
    threshold = BASE_LEVEL_XP
    accumulated = 0

    while xp >= accumulated + threshold and level < MAX_LEVEL:
        accumulated += threshold
        level += 1
        threshold *= 2

    if level >= MAX_LEVEL:
        return LevelInfo(
            level=level,
            current_xp=xp - accumulated,
            next_level_xp=0,
            is_max_level=True,
        )

    return LevelInfo(level=level, current_xp=xp - accumulated, next_level_xp=threshold)


def xp_floor_for_level(level: int) -> int:
    """Cumulative XP at which `level` is reached."""
    if level <= 1:
        return 0
    capped = min(level, MAX_LEVEL)
    return BASE_LEVEL_XP * (2 ** (capped - 1) - 1)


@dataclass(frozen=True)
class BadgeDefinition:
    """A badge and the predicate that earns it."""

    id: BadgeId
    name: str
    description: str
    icon: str
    tier: BadgeTier
    predicate: Callable[[UserStats], bool]

    def evaluate(self, stats: UserStats) -> Badge:
        return Badge(
            id=self.id,
            name=self.name,
            description=self.description,
            icon=self.icon,
            tier=self.tier,
            earned=self.predicate(stats),
        )


def _prompt_master(stats: UserStats) -> bool:
    last_five = stats.prompt_scores[-5:]
    return len(last_five) >= 5 and all(score > 95 for score in last_five)


BADGE_DEFINITIONS: tuple[BadgeDefinition, ...] = (
    BadgeDefinition(
        id=BadgeId.NOVICE,
        name="Novice Creator",
        description="Generated your first video",
        icon="🥉",
        tier=BadgeTier.BRONZE,
        predicate=lambda stats: stats.total_videos >= 1,
    ),
    BadgeDefinition(
        id=BadgeId.CRAFTER,
        name="Content Crafter",
        description="5 high-quality prompts (score > 70)",
        icon="🥈",
        tier=BadgeTier.SILVER,
        predicate=lambda stats: stats.high_quality_count >= 5,
    ),
    BadgeDefinition(
        id=BadgeId.ALCHEMIST,
        name="Ad Alchemist",
        description="15 videos + 3 prompts scoring > 90",
        icon="🥇",
        tier=BadgeTier.GOLD,
        predicate=lambda stats: stats.total_videos >= 15 and stats.over90_count >= 3,
    ),
    BadgeDefinition(
        id=BadgeId.VISIONARY,
        name="Viral Visionary",
        description="30 videos + average score > 85",
        icon="💎",
        tier=BadgeTier.DIAMOND,
        predicate=lambda stats: stats.total_videos >= 30 and stats.avg_quality > 85,
    ),
    BadgeDefinition(
        id=BadgeId.PROMPT_MASTER,
        name="Prompt Master",
        description="5 consecutive prompts scoring > 95",
        icon="🎯",
        tier=BadgeTier.SPECIAL,
        predicate=_prompt_master,
    ),
)


def evaluate_badges(stats: UserStats) -> list[Badge]:
    """Evaluate every badge against the given stats, in display order."""
    return [definition.evaluate(stats) for definition in BADGE_DEFINITIONS]


def earned_badge_ids(stats: UserStats) -> frozenset[BadgeId]:
    return frozenset(badge.id for badge in evaluate_badges(stats) if badge.earned)


def newly_earned_badges(before: UserStats, after: UserStats) -> list[Badge]:
    """Badges earned by `after` that `before` did not have."""
    previously = earned_badge_ids(before)
    return [
        badge for badge in evaluate_badges(after) if badge.earned and badge.id not in previously
    ]
