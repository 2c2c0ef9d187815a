"""Stats aggregation for completed jobs.

`apply_completion` is the only code path that produces a new `UserStats`
from an old one. `StatsAggregator` wraps it and persists every snapshot.
"""

from ugc_engine.domain.enums import ModelId
from ugc_engine.domain.models import UserStats
from ugc_engine.logging import get_logger
from ugc_engine.services.progression import level_from_xp, xp_gain
from ugc_engine.services.store import ProgressRepository
from ugc_engine.utils.numbers import round_half_up

logger = get_logger(__name__)

HIGH_QUALITY_THRESHOLD = 70
EXCELLENT_THRESHOLD = 90


def apply_completion(prev: UserStats, score: int, model: ModelId | str) -> UserStats:
    """Fold one completed job's quality score into the running stats."""
    scores = [*prev.prompt_scores, score]
    xp = prev.xp + xp_gain(score, 1, model)

    return UserStats(
        total_videos=prev.total_videos + 1,
        high_quality_count=prev.high_quality_count + (1 if score > HIGH_QUALITY_THRESHOLD else 0),
        over90_count=prev.over90_count + (1 if score > EXCELLENT_THRESHOLD else 0),
        avg_quality=round_half_up(sum(scores) / len(scores)),
        # TODO: reset the streak on failed jobs once the intended semantics are settled
        streak=prev.streak + 1,
        xp=xp,
        level=level_from_xp(xp).level,
        prompt_scores=scores,
    )


class StatsAggregator:
    """Applies completions and persists the resulting snapshot."""

    def __init__(self, repository: ProgressRepository) -> None:
        self.repository = repository

    def apply_completion(self, prev: UserStats, score: int, model: ModelId | str) -> UserStats:
        stats = apply_completion(prev, score, model)
        self.repository.save_stats(stats)

        logger.info(
            "stats_updated",
            score=score,
            model=str(model),
            total_videos=stats.total_videos,
            xp=stats.xp,
            level=stats.level,
        )
        return stats
