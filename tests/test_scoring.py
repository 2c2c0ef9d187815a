"""Tests for prompt quality scoring."""

import pytest

from ugc_engine.domain.models import AdBrief
from ugc_engine.services.scoring import DETAIL_KEYWORDS, score_breakdown, score_brief


def test_empty_brief_scores_zero() -> None:
    """An empty brief earns nothing from any signal."""
    brief = AdBrief(product="", target_audience="", product_features="", video_setting="")

    assert score_brief(brief) == 0


def test_energy_drink_scenario(energy_drink_brief: AdBrief) -> None:
    """A detailed brief scores well across every signal."""
    result = score_breakdown(energy_drink_brief)

    assert result.total >= 60
    assert result.length == 6  # 130 combined characters
    assert set(result.matched_keywords) == {"bright", "morning", "modern", "natural"}
    assert result.details == 24
    assert result.audience == 20
    assert result.features == 15
    assert result.setting == 10
    assert result.total == 75
    assert result.label == "strong"


def test_scoring_is_deterministic(energy_drink_brief: AdBrief) -> None:
    assert score_brief(energy_drink_brief) == score_brief(energy_drink_brief)


class TestLengthSignal:
    @pytest.mark.parametrize(
        ("product_length", "expected"),
        [
            (0, 0),  # combined 3
            (17, 0),  # combined 20
            (18, 1),  # combined 21
            (97, 5),  # combined 100
            (497, 25),  # combined 500
            (498, 0),  # combined 501
            (600, 0),
        ],
    )
    def test_length_points(self, product_length: int, expected: int) -> None:
        brief = AdBrief(product="x" * product_length)
        assert score_breakdown(brief).length == expected

    def test_short_text_never_earns_length_points(self) -> None:
        for text in ["", "a", "soap", "shoes for kids"]:
            brief = AdBrief(product=text)
            assert score_breakdown(brief).length == 0


class TestDetailSignal:
    def test_keywords_are_counted_once(self) -> None:
        brief = AdBrief(video_setting="bright bright bright")
        result = score_breakdown(brief)

        assert result.matched_keywords == ("bright",)
        assert result.details == 6

    def test_keywords_match_case_insensitively(self) -> None:
        brief = AdBrief(product="CANDID Lifestyle shot")
        assert score_breakdown(brief).details == 12

    def test_detail_points_are_capped(self) -> None:
        brief = AdBrief(video_setting="bright warm cozy modern clean candid vibrant")
        result = score_breakdown(brief)

        assert len(result.matched_keywords) == 7
        assert result.details == 30

    def test_vocabulary_has_twenty_terms(self) -> None:
        assert len(DETAIL_KEYWORDS) == 20
        assert len(set(DETAIL_KEYWORDS)) == 20


class TestAudienceSignal:
    @pytest.mark.parametrize(
        ("audience", "expected"),
        [
            ("", 0),
            ("moms", 0),
            ("young professionals", 10),
            ("ages 18-24", 5),
            ("busy parents aged 30-45", 15),
            ("students, teachers", 15),
            ("moms and dads", 15),
            ("brand lovers", 15),  # "and" matches as a substring
            ("Runners aged 25-40, marathon focused", 20),
        ],
    )
    def test_audience_points(self, audience: str, expected: int) -> None:
        assert score_breakdown(AdBrief(target_audience=audience)).audience == expected


class TestFeatureSignal:
    @pytest.mark.parametrize(
        ("features", "expected"),
        [
            ("", 0),
            ("a, bb", 0),
            ("a, bb, ccc; dddd", 10),
            ("waterproof", 5),
            ("light; strong; cheap; fast", 15),
        ],
    )
    def test_feature_points(self, features: str, expected: int) -> None:
        assert score_breakdown(AdBrief(product_features=features)).features == expected


class TestSettingSignal:
    @pytest.mark.parametrize(
        ("setting", "expected"),
        [
            ("", 0),
            ("at home", 0),
            ("a kitchen at home", 10),
            ("sunlit-rooftop-garden", 5),
            ("in a big car", 5),
        ],
    )
    def test_setting_points(self, setting: str, expected: int) -> None:
        assert score_breakdown(AdBrief(video_setting=setting)).setting == expected


@pytest.mark.parametrize(
    "text",
    [
        "",
        " ",
        "x" * 10_000,
        "bright " * 200,
        "1, 2, 3; 4; 5, 6 and 7",
        "ünïcødé ✨ 🎬 close-up, candid, warm",
    ],
)
def test_score_stays_within_bounds(text: str) -> None:
    brief = AdBrief(
        product=text,
        target_audience=text,
        product_features=text,
        video_setting=text,
    )
    assert 0 <= score_brief(brief) <= 100


def test_maximal_brief_is_clamped_to_100() -> None:
    brief = AdBrief(
        product="Protein bar " + "with clean natural ingredients " * 3,
        target_audience="Athletes and coaches, aged 18-35",
        product_features="high protein, low sugar, vegan, gluten free",
        video_setting="bright warm cozy modern outdoor morning gym with candid close-up shots",
    )
    result = score_breakdown(brief)

    assert result.details == 30
    assert result.total == min(
        100, result.length + result.details + result.audience + result.features + result.setting
    )
    assert result.total <= 100


def test_breakdown_to_dict(energy_drink_brief: AdBrief) -> None:
    data = score_breakdown(energy_drink_brief).to_dict()

    assert data["total"] == 75
    assert data["components"]["audience"] == 20
    assert "bright" in data["matchedKeywords"]
