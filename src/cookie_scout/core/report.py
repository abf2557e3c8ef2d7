"""Report export: plain data views of an AnalysisResult for presentation layers."""

from __future__ import annotations

from typing import Any

from cookie_scout.core.base import AnalysisResult, CookieCategory, TrackerSignature
from cookie_scout.core.domains import describe_domain, is_first_party_cookie

COOKIE_PURPOSE: dict[CookieCategory, str] = {
    CookieCategory.ESSENTIAL: "Required for basic site functionality",
    CookieCategory.ANALYTICS: "Used to track user behavior and site performance",
    CookieCategory.MARKETING: "Used for advertising and tracking across sites",
    CookieCategory.SOCIAL: "Related to social media integrations",
    CookieCategory.UNKNOWN: "Purpose could not be determined",
}

# Keyed by TrackerSignature.label
_TRACKER_IMPACT: dict[str, str] = {
    "Marketing": "High - Tracks users across websites for advertising",
    "Marketing/CRM": "High - Tracks users across websites for advertising",
    "Analytics": "Medium - Collects usage data and behavior patterns",
    "Social": "Medium - May share data with social networks",
    "A/B Testing": "Low - Used for page optimization experiments",
    "Security": "Low - Used for site protection",
    "CDN/Security": "Low - Used for site protection",
    "Error Tracking": "Low - Collects error reports for debugging",
    "Customer Support": "Low - Enables support chat functionality",
}

MAX_RESOURCE_LENGTH = 120


def privacy_impact(signature: TrackerSignature) -> str:
    return _TRACKER_IMPACT.get(signature.label, "Unknown - Impact could not be determined")


def shorten(text: str, limit: int = MAX_RESOURCE_LENGTH) -> str:
    """Collapse whitespace and cut long resource identifiers (inline scripts) for display."""
    flat = " ".join(text.split())
    if len(flat) <= limit:
        return flat
    return flat[: limit - 3] + "..."


def build_report(result: AnalysisResult) -> dict[str, Any]:
    """JSON-ready summary of an analysis. Cookie values are never included."""
    first_party = result.domains.first_party

    return {
        "url": result.url,
        "score": result.score,
        "rating": result.rating.value,
        "penalty": {
            "cookies": result.penalty.cookies,
            "trackers": result.penalty.trackers,
            "domains": result.penalty.domains,
            "total": result.penalty.total,
        },
        "cookies": [
            {
                "name": c.cookie.name,
                "category": c.category.value,
                "domain": c.cookie.domain,
                "path": c.cookie.path,
                "secure": c.cookie.secure,
                "http_only": c.cookie.http_only,
                "same_site": c.cookie.same_site,
                "first_party": is_first_party_cookie(c.cookie, first_party),
                "purpose": COOKIE_PURPOSE[c.category],
            }
            for c in result.cookies
        ],
        "trackers": [
            {
                "pattern": m.signature.pattern,
                "vendor": m.signature.vendor,
                "category": m.signature.category.value,
                "kind": m.signature.label,
                "description": m.signature.description,
                "resource": shorten(m.resource),
            }
            for m in result.tracker_matches
        ],
        "first_party_domain": first_party,
        "third_party_domains": [
            {"domain": d, "type": describe_domain(d)[0]} for d in result.domains.third_party
        ],
        "third_party_count": result.third_party_count,
    }
