"""Tests for stats aggregation."""

import pytest
from pydantic import ValidationError

from ugc_engine.domain.enums import ModelId
from ugc_engine.domain.models import UserStats
from ugc_engine.services.stats import StatsAggregator, apply_completion
from ugc_engine.services.store import ProgressRepository


def test_first_completion() -> None:
    """A first strong job updates every counter."""
    stats = apply_completion(UserStats(), 75, ModelId.NANO_VEO)

    assert stats.total_videos == 1
    assert stats.high_quality_count == 1
    assert stats.over90_count == 0
    assert stats.avg_quality == 75
    assert stats.streak == 1
    assert stats.xp == 90
    assert stats.level == 1
    assert stats.prompt_scores == [75]


def test_low_score_on_sora() -> None:
    stats = apply_completion(UserStats(), 35, ModelId.SORA_2)

    assert stats.xp == 53
    assert stats.high_quality_count == 0
    assert stats.avg_quality == 35


def test_average_rounds_half_up() -> None:
    stats = apply_completion(UserStats(), 70, ModelId.NANO_VEO)
    stats = apply_completion(stats, 71, ModelId.NANO_VEO)

    assert stats.avg_quality == 71  # 70.5


def test_over_ninety_counts_strictly() -> None:
    stats = apply_completion(UserStats(), 90, ModelId.NANO_VEO)
    stats = apply_completion(stats, 91, ModelId.NANO_VEO)

    assert stats.over90_count == 1
    assert stats.high_quality_count == 2


def test_level_follows_xp() -> None:
    stats = UserStats()
    for _ in range(3):
        stats = apply_completion(stats, 50, ModelId.SORA_2)

    assert stats.xp == 225
    assert stats.level == 2


def test_previous_stats_are_not_mutated() -> None:
    before = apply_completion(UserStats(), 60, ModelId.NANO_VEO)
    snapshot = before.model_copy(deep=True)

    apply_completion(before, 90, ModelId.NANO_VEO)

    assert before == snapshot


def test_counts_stay_consistent_over_many_jobs() -> None:
    stats = UserStats()
    scores = [0, 15, 70, 71, 90, 91, 100, 42, 88, 99]
    for score in scores:
        stats = apply_completion(stats, score, ModelId.SORA_2)

    assert stats.total_videos == len(scores)
    assert stats.prompt_scores == scores
    assert stats.high_quality_count == 6
    assert stats.over90_count == 3
    assert stats.high_quality_count <= stats.total_videos


def test_aggregator_persists_snapshot(repository: ProgressRepository) -> None:
    aggregator = StatsAggregator(repository)

    stats = aggregator.apply_completion(UserStats(), 80, ModelId.NANO_VEO)

    assert repository.load_stats() == stats


class TestUserStatsValidation:
    def test_scores_must_match_total(self) -> None:
        with pytest.raises(ValidationError):
            UserStats(total_videos=2, prompt_scores=[50], avg_quality=50)

    def test_average_must_match_scores(self) -> None:
        with pytest.raises(ValidationError):
            UserStats(total_videos=1, prompt_scores=[50], avg_quality=60)

    def test_high_quality_cannot_exceed_total(self) -> None:
        with pytest.raises(ValidationError):
            UserStats(total_videos=1, prompt_scores=[80], avg_quality=80, high_quality_count=2)

    def test_level_is_bounded(self) -> None:
        with pytest.raises(ValidationError):
            UserStats(level=11)

    def test_camel_case_round_trip(self) -> None:
        stats = apply_completion(UserStats(), 95, ModelId.NANO_VEO)
        data = stats.model_dump(by_alias=True)

        assert data["totalVideos"] == 1
        assert data["over90Count"] == 1
        assert data["promptScores"] == [95]
        assert UserStats.model_validate(data) == stats
