"""Tracker matcher: find tracker signatures among the page's resources."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from cookie_scout.core.base import TrackerMatch, TrackerSignature
from cookie_scout.core.signatures import SignatureDatabase

logger = logging.getLogger(__name__)


def _clean_resources(resources: Iterable[str]) -> list[str]:
    cleaned: list[str] = []
    for resource in resources:
        if not isinstance(resource, str):
            continue
        resource = resource.strip()
        if resource:
            cleaned.append(resource)
    return cleaned


def match_trackers(resources: Iterable[str], database: SignatureDatabase) -> list[TrackerMatch]:
    """Return deduplicated tracker matches ordered by first occurrence.

    Overlapping signatures on one resource are all kept: the score counts
    matched signatures, not matched resources.
    """
    cleaned = _clean_resources(resources)
    matches = database.find_tracker_matches(cleaned)
    logger.debug(
        "Scanned %d resources: %d matches, %d distinct signatures",
        len(cleaned),
        len(matches),
        len(distinct_signatures(matches)),
    )
    return matches


def distinct_signatures(matches: Iterable[TrackerMatch]) -> list[TrackerSignature]:
    """Signatures that fired at least once, in order of first match."""
    signatures: list[TrackerSignature] = []
    seen: set[TrackerSignature] = set()
    for match in matches:
        if match.signature not in seen:
            seen.add(match.signature)
            signatures.append(match.signature)
    return signatures
