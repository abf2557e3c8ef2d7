"""Privacy scorer: turn classified cookies, tracker matches and third-party domains into a score."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, TypedDict

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from cookie_scout.core.base import (
    ClassifiedCookie,
    CookieCategory,
    PenaltyBreakdown,
    Rating,
    TrackerMatch,
)
from cookie_scout.core.exceptions import ConfigError
from cookie_scout.core.matcher import distinct_signatures
from cookie_scout.core.paths import SCORING_PATH

logger = logging.getLogger(__name__)

MAX_SCORE = 100
MIN_SCORE = 0


class _RatingTier(TypedDict):
    min: int
    label: str
    color: str


class PenaltyWeights(BaseModel):
    """Per-item penalties subtracted from a perfect score."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    essential_cookie: int = Field(ge=0)
    analytics_cookie: int = Field(ge=0)
    unknown_cookie: int = Field(ge=0)
    marketing_cookie: int = Field(ge=0)
    social_cookie: int = Field(ge=0)
    tracker_signature: int = Field(ge=0)
    third_party_domain: int = Field(ge=0)
    third_party_allowance: int = Field(ge=0)

    @model_validator(mode="after")
    def _check_tiers(self) -> PenaltyWeights:
        # Unrecognized cookies sit between analytics and marketing/social
        if not self.analytics_cookie <= self.unknown_cookie <= self.marketing_cookie:
            raise ValueError("unknown_cookie must lie between analytics_cookie and marketing_cookie")
        if self.unknown_cookie > self.social_cookie:
            raise ValueError("unknown_cookie must not exceed social_cookie")
        return self

    def cookie_penalty(self, category: CookieCategory) -> int:
        return {
            CookieCategory.ESSENTIAL: self.essential_cookie,
            CookieCategory.ANALYTICS: self.analytics_cookie,
            CookieCategory.MARKETING: self.marketing_cookie,
            CookieCategory.SOCIAL: self.social_cookie,
            CookieCategory.UNKNOWN: self.unknown_cookie,
        }[category]

    def with_overrides(self, overrides: Mapping[str, Any]) -> PenaltyWeights:
        """Return a copy with some weights replaced, validated as a whole."""
        try:
            return PenaltyWeights.model_validate({**self.model_dump(), **overrides})
        except ValidationError as e:
            raise ConfigError(f"Invalid score weights: {e}") from e


def _load_scoring() -> tuple[PenaltyWeights, list[_RatingTier]]:
    with open(SCORING_PATH) as f:
        data = yaml.safe_load(f)
    tiers: list[_RatingTier] = sorted(data["rating_tiers"], key=lambda t: t["min"], reverse=True)
    return PenaltyWeights.model_validate(data["weights"]), tiers


DEFAULT_WEIGHTS, _RATING_TIERS = _load_scoring()


def compute_penalty(
    cookies: Iterable[ClassifiedCookie],
    matches: Iterable[TrackerMatch],
    third_party_count: int,
    weights: PenaltyWeights = DEFAULT_WEIGHTS,
) -> PenaltyBreakdown:
    """Itemised penalty.

    Trackers are penalized once per distinct signature, however many
    resources it fired on.
    """
    cookie_penalty = sum(weights.cookie_penalty(c.category) for c in cookies)
    tracker_penalty = len(distinct_signatures(matches)) * weights.tracker_signature
    over_allowance = max(0, third_party_count - weights.third_party_allowance)
    domain_penalty = over_allowance * weights.third_party_domain

    return PenaltyBreakdown(cookies=cookie_penalty, trackers=tracker_penalty, domains=domain_penalty)


def score_from_penalty(penalty: int) -> int:
    return max(MIN_SCORE, min(MAX_SCORE, MAX_SCORE - penalty))


def compute_score(
    cookies: Iterable[ClassifiedCookie],
    matches: Iterable[TrackerMatch],
    third_party_count: int,
    weights: PenaltyWeights = DEFAULT_WEIGHTS,
) -> tuple[int, Rating]:
    """Return (score 0-100, rating). Pure function of its inputs."""
    penalty = compute_penalty(cookies, matches, third_party_count, weights)
    score = score_from_penalty(penalty.total)
    return score, get_rating(score)


def _tier_for(score: float) -> _RatingTier:
    for tier in _RATING_TIERS:
        if score >= tier["min"]:
            return tier
    return _RATING_TIERS[-1]


def get_rating(score: float) -> Rating:
    """Return the rating band a score falls into."""
    return Rating(_tier_for(score)["label"])


def get_rating_color(score: float) -> str:
    """Return a Rich color name for a score."""
    return str(_tier_for(score)["color"])
