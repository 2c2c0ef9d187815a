"""Prompt quality scoring for ad briefs.

The score rewards briefs that give the video model something concrete to work
with. It is an additive budget across five independent signals:

    length      0-25   overall amount of text
    details     0-30   descriptive vocabulary (lighting, mood, framing)
    audience    0-20   how specific the target audience is
    features    0-15   number of listed product features
    setting     0-10   how specific the video setting is

Each signal is capped on its own and the total is clamped to 0-100. The
function is pure: the same brief always yields the same score.
"""

import re
from dataclasses import dataclass

from ugc_engine.domain.models import AdBrief
from ugc_engine.utils.numbers import clamp

DETAIL_KEYWORDS: tuple[str, ...] = (
    "close-up",
    "bright",
    "energetic",
    "authentic",
    "natural",
    "morning",
    "evening",
    "outdoor",
    "indoor",
    "casual",
    "professional",
    "lifestyle",
    "vibrant",
    "warm",
    "cozy",
    "modern",
    "minimal",
    "clean",
    "dynamic",
    "candid",
)

MAX_LENGTH_POINTS = 25
MAX_DETAIL_POINTS = 30
MAX_FEATURE_POINTS = 15

_DIGIT_RE = re.compile(r"\d")
_FEATURE_SPLIT_RE = re.compile(r"[,;]")


@dataclass(frozen=True)
class PromptScore:
    """Score of a brief with its per-signal breakdown."""

    length: int
    details: int
    audience: int
    features: int
    setting: int
    matched_keywords: tuple[str, ...] = ()

    @property
    def total(self) -> int:
        return clamp(
            self.length + self.details + self.audience + self.features + self.setting,
            0,
            100,
        )

    @property
    def label(self) -> str:
        total = self.total
        if total > 90:
            return "excellent"
        if total >= 70:
            return "strong"
        if total >= 40:
            return "fair"
        return "weak"

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "total": self.total,
            "label": self.label,
            "components": {
                "length": self.length,
                "details": self.details,
                "audience": self.audience,
                "features": self.features,
                "setting": self.setting,
            },
            "matchedKeywords": list(self.matched_keywords),
        }


def _combined_text(brief: AdBrief) -> str:
    return (
        f"{brief.product} {brief.target_audience} "
        f"{brief.product_features} {brief.video_setting}"
    ).lower()


def _length_points(text: str) -> int:
    length = len(text)
    if 20 < length <= 500:
        return min(MAX_LENGTH_POINTS, length // 20)
    return 0


def _matched_keywords(text: str) -> tuple[str, ...]:
    return tuple(keyword for keyword in DETAIL_KEYWORDS if keyword in text)


def _audience_points(audience: str) -> int:
    points = 0
    if len(audience) > 10:
        points += 10
    if _DIGIT_RE.search(audience):  # age ranges
        points += 5
    # Substring match, so "brand" also counts as a compound description
    if "," in audience or "and" in audience:
        points += 5
    return points


def _feature_points(features: str) -> int:
    count = sum(1 for token in _FEATURE_SPLIT_RE.split(features) if len(token.strip()) > 2)
    return min(MAX_FEATURE_POINTS, count * 5)


def _setting_points(setting: str) -> int:
    points = 0
    if len(setting) > 15:
        points += 5
    if len(setting.split()) > 3:
        points += 5
    return points


def score_breakdown(brief: AdBrief) -> PromptScore:
    """Score a brief and return every signal's contribution."""
    text = _combined_text(brief)
    keywords = _matched_keywords(text)

    return PromptScore(
        length=_length_points(text),
        details=min(MAX_DETAIL_POINTS, len(keywords) * 6),
        audience=_audience_points(brief.target_audience),
        features=_feature_points(brief.product_features),
        setting=_setting_points(brief.video_setting),
        matched_keywords=keywords,
    )


def score_brief(brief: AdBrief) -> int:
    """Return the 0-100 quality score of a brief."""
    return score_breakdown(brief).total
