"""Tests for domain models."""

import pytest
from pydantic import ValidationError

from ugc_engine.adapters.workflow.base import AccessGrant, JobAccepted, JobStatusUpdate
from ugc_engine.domain.enums import JobState, ModelId
from ugc_engine.domain.models import MODELS, AdBrief, LevelInfo, get_model_option
from ugc_engine.utils.numbers import clamp, round_half_up


class TestAdBrief:
    """Test the AdBrief model."""

    def test_defaults(self) -> None:
        brief = AdBrief()

        assert brief.product == ""
        assert brief.target_audience == ""
        assert brief.model is ModelId.NANO_VEO

    def test_accepts_camel_case_and_legacy_keys(self) -> None:
        camel = AdBrief.model_validate({"targetAudience": "Runners", "productPhotoUrl": "u"})
        legacy = AdBrief.model_validate({"icp": "Runners"})

        assert camel.target_audience == "Runners"
        assert camel.product_photo_url == "u"
        assert legacy.target_audience == "Runners"

    def test_serializes_camel_case(self) -> None:
        data = AdBrief(product="Soap", target_audience="Parents").model_dump(by_alias=True)

        assert data["targetAudience"] == "Parents"
        assert "productFeatures" in data
        assert data["model"] == "Nano + Veo 3.1"

    def test_is_frozen(self) -> None:
        brief = AdBrief(product="Soap")
        with pytest.raises(ValidationError):
            brief.product = "Shampoo"

    def test_feature_list(self) -> None:
        brief = AdBrief(product_features="vegan, ; cruelty-free;  travel size ")
        assert brief.feature_list == ["vegan", "cruelty-free", "travel size"]


class TestCatalogue:
    def test_models(self) -> None:
        assert [option.id for option in MODELS] == [ModelId.NANO_VEO, ModelId.SORA_2]

    def test_lookup(self) -> None:
        assert get_model_option("Sora 2").xp_multiplier == 1.5
        assert get_model_option("Unknown") is None


class TestJobState:
    def test_terminal_states(self) -> None:
        assert JobState.COMPLETED.is_terminal
        assert JobState.FAILED.is_terminal
        assert not JobState.PROCESSING.is_terminal
        assert not JobState.IDLE.is_terminal


class TestLevelInfo:
    def test_progress_percent_rounds(self) -> None:
        assert LevelInfo(level=3, current_xp=1, next_level_xp=400).progress_percent == 0
        assert LevelInfo(level=3, current_xp=2, next_level_xp=400).progress_percent == 1


class TestWireModels:
    def test_job_accepted_requires_id(self) -> None:
        with pytest.raises(ValidationError):
            JobAccepted.model_validate({"jobId": ""})

    def test_status_update(self) -> None:
        update = JobStatusUpdate.model_validate({"status": "Ready", "videoUrl": None})
        assert update.is_finished is False

    def test_access_grant_aliases(self) -> None:
        assert AccessGrant.model_validate({"remainingQuota": 1}).remaining_quota == 1
        assert AccessGrant.model_validate({"remaining": 0}).remaining_quota == 0
        assert AccessGrant.model_validate({"isAdmin": True}).is_admin is True


@pytest.mark.parametrize(
    ("value", "expected"),
    [(0.5, 1), (1.5, 2), (2.5, 3), (52.5, 53), (70.49, 70), (0.0, 0)],
)
def test_round_half_up(value: float, expected: int) -> None:
    assert round_half_up(value) == expected


def test_clamp() -> None:
    assert clamp(120, 0, 100) == 100
    assert clamp(-3, 0, 100) == 0
    assert clamp(42, 0, 100) == 42
