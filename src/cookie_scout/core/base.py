"""Core data model: cookies, tracker signatures, matches and the analysis result."""

from __future__ import annotations

import re
from enum import StrEnum
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field, model_validator


class CookieCategory(StrEnum):
    ESSENTIAL = "Essential"
    ANALYTICS = "Analytics"
    MARKETING = "Marketing"
    SOCIAL = "Social"
    UNKNOWN = "Unknown"


# Resolution order when a cookie name matches patterns of several categories.
# Unknown is never matched, only used as the fallback.
CATEGORY_PRIORITY: tuple[CookieCategory, ...] = (
    CookieCategory.ESSENTIAL,
    CookieCategory.SOCIAL,
    CookieCategory.MARKETING,
    CookieCategory.ANALYTICS,
)


class TrackerCategory(StrEnum):
    ANALYTICS = "Analytics"
    MARKETING = "Marketing"
    SOCIAL = "Social"
    OTHER = "Other"


class Rating(StrEnum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    MODERATE = "Moderate"
    POOR = "Poor"
    CRITICAL = "Critical"


class Cookie(BaseModel):
    """A cookie as set by the analyzed response. The value is never inspected."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    value: str = ""
    domain: str | None = None
    path: str | None = None
    secure: bool = False
    http_only: bool = False
    same_site: str | None = None


class ClassifiedCookie(BaseModel):
    model_config = ConfigDict(frozen=True)

    cookie: Cookie
    category: CookieCategory

    @property
    def name(self) -> str:
        return self.cookie.name


@lru_cache(maxsize=512)
def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern, re.IGNORECASE)


class TrackerSignature(BaseModel):
    """A known pattern identifying a tracking vendor's script, pixel or endpoint."""

    model_config = ConfigDict(frozen=True)

    pattern: str = Field(min_length=1)
    vendor: str
    category: TrackerCategory
    description: str
    regex: bool = False
    kind: str | None = None  # finer label for display, e.g. "Error Tracking"

    @model_validator(mode="after")
    def _check_regex(self) -> TrackerSignature:
        if self.regex:
            try:
                _compile(self.pattern)
            except re.error as e:
                raise ValueError(f"invalid regex {self.pattern!r}: {e}") from e
        return self

    @property
    def label(self) -> str:
        return self.kind or self.category.value

    def matches(self, resource: str) -> bool:
        """Case-insensitive substring containment, or regex search for regex signatures."""
        if self.regex:
            return _compile(self.pattern).search(resource) is not None
        return self.pattern.lower() in resource.lower()


class TrackerMatch(BaseModel):
    """A signature paired with the resource identifier that triggered it."""

    model_config = ConfigDict(frozen=True)

    signature: TrackerSignature
    resource: str


class DomainSet(BaseModel):
    """First-party host and the distinct third-party hosts seen among page resources."""

    model_config = ConfigDict(frozen=True)

    first_party: str
    third_party: tuple[str, ...] = ()

    @property
    def third_party_count(self) -> int:
        return len(self.third_party)


class PenaltyBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    cookies: int = 0
    trackers: int = 0
    domains: int = 0

    @property
    def total(self) -> int:
        return self.cookies + self.trackers + self.domains


class PageSnapshot(BaseModel):
    """Everything the fetch layer hands to the analysis core."""

    model_config = ConfigDict(frozen=True)

    url: str
    cookies: tuple[Cookie, ...] = ()
    resources: tuple[str, ...] = ()
    final_url: str | None = None
    status_code: int | None = None


class AnalysisResult(BaseModel):
    """Immutable outcome of one analysis run."""

    model_config = ConfigDict(frozen=True)

    url: str
    cookies: tuple[ClassifiedCookie, ...] = ()
    tracker_matches: tuple[TrackerMatch, ...] = ()
    domains: DomainSet
    score: int = Field(ge=0, le=100)  # 0 = heavily tracked, 100 = clean
    rating: Rating
    penalty: PenaltyBreakdown = Field(default_factory=PenaltyBreakdown)

    @property
    def third_party_count(self) -> int:
        return self.domains.third_party_count

    @property
    def signatures(self) -> list[TrackerSignature]:
        """Distinct matched signatures, in order of first match."""
        seen: list[TrackerSignature] = []
        for match in self.tracker_matches:
            if match.signature not in seen:
                seen.append(match.signature)
        return seen

    def cookies_by_category(self) -> dict[CookieCategory, list[ClassifiedCookie]]:
        grouped: dict[CookieCategory, list[ClassifiedCookie]] = {c: [] for c in CookieCategory}
        for classified in self.cookies:
            grouped[classified.category].append(classified)
        return grouped
