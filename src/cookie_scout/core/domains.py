"""Domain analyzer: split observed hosts into first-party and third-party."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from urllib.parse import urlsplit

from cookie_scout.core.base import Cookie, DomainSet

logger = logging.getLogger(__name__)

_URL_PREFIXES = ("http://", "https://", "//")
_PREFIX_RE = re.compile(r"^(?:https?:)?//", re.IGNORECASE)
_AUTHORITY_END_RE = re.compile(r"[/?#]")

# (substrings, type, description), first hit wins
_DOMAIN_TYPES: list[tuple[tuple[str, ...], str, str]] = [
    (("google", "gstatic"), "Google Services", "Analytics, fonts, APIs, or advertising"),
    (("facebook", "fbcdn"), "Facebook/Meta", "Social plugins or tracking"),
    (("cloudflare",), "Cloudflare", "CDN and security services"),
    (("cdn", "akamai", "fastly"), "CDN", "Content delivery network"),
    (("analytics", "tracking"), "Analytics", "User tracking and analytics"),
    (("ads", "doubleclick"), "Advertising", "Ad serving and tracking"),
    (("twitter", "linkedin"), "Social Media", "Social network integration"),
    (("stripe", "paypal"), "Payment", "Payment processing"),
    (("sentry", "bugsnag"), "Error Tracking", "Error monitoring service"),
]


def normalize_host(value: str) -> str:
    """Lowercase host of a URL or bare hostname, without port, trailing dot or 'www.'.

    Returns an empty string when no host can be read.
    """
    value = value.strip()
    if not value:
        return ""
    if "://" not in value and not value.startswith("//"):
        value = "//" + value

    try:
        host = urlsplit(value).hostname or ""
    except ValueError:
        return ""

    host = host.strip(".")
    if host.startswith("www."):
        host = host[4:]
    return host


def extract_host(resource: str) -> str | None:
    """Host of an absolute or protocol-relative URL; None for anything else.

    Relative paths, data: URIs and inline script markers carry no host.
    """
    resource = resource.strip()
    if not resource.lower().startswith(_URL_PREFIXES):
        return None
    # Inline script bodies can open with a "//" comment; real hosts hold no whitespace
    rest = _PREFIX_RE.sub("", resource, count=1)
    authority = _AUTHORITY_END_RE.split(rest, maxsplit=1)[0]
    if not authority or any(ch.isspace() for ch in authority):
        return None
    return normalize_host(resource) or None


def is_first_party_host(host: str, first_party: str) -> bool:
    """True for the first-party host itself and any of its subdomains."""
    if not first_party:
        return False
    return host == first_party or host.endswith("." + first_party)


def analyze_domains(url: str, resources: Iterable[str]) -> DomainSet:
    """Collect the distinct third-party hosts, in order of first appearance."""
    first_party = normalize_host(url)
    third_party: list[str] = []
    seen: set[str] = set()

    for resource in resources:
        host = extract_host(resource)
        if host is None or host in seen or is_first_party_host(host, first_party):
            continue
        seen.add(host)
        third_party.append(host)

    logger.debug("First party %s, %d third-party domains", first_party, len(third_party))
    return DomainSet(first_party=first_party, third_party=tuple(third_party))


def is_first_party_cookie(cookie: Cookie, first_party: str) -> bool:
    """Whether a cookie belongs to the analyzed site.

    A cookie without a Domain attribute is host-only and therefore first-party.
    A Domain attribute on a parent of the site (``Domain=example.com`` set by
    ``shop.example.com``) is first-party too.
    """
    if not cookie.domain or not cookie.domain.strip():
        return True
    host = normalize_host(cookie.domain)
    if not host:
        return True
    return is_first_party_host(host, first_party) or is_first_party_host(first_party, host)


def describe_domain(domain: str) -> tuple[str, str]:
    """Return a (type, description) label for a third-party domain."""
    lowered = domain.lower()
    for needles, kind, description in _DOMAIN_TYPES:
        if any(n in lowered for n in needles):
            return kind, description
    return "External", "Third-party resource"
