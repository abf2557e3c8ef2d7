"""Analysis pipeline: turn a fetched page snapshot into an AnalysisResult."""

from __future__ import annotations

import logging

from cookie_scout.core.base import AnalysisResult, PageSnapshot
from cookie_scout.core.classifier import classify_cookies
from cookie_scout.core.domains import analyze_domains
from cookie_scout.core.matcher import match_trackers
from cookie_scout.core.scoring import (
    DEFAULT_WEIGHTS,
    PenaltyWeights,
    compute_penalty,
    get_rating,
    score_from_penalty,
)
from cookie_scout.core.signatures import SignatureDatabase, load_signature_database

logger = logging.getLogger(__name__)


def analyze(
    snapshot: PageSnapshot,
    database: SignatureDatabase | None = None,
    weights: PenaltyWeights | None = None,
) -> AnalysisResult:
    """Classify, match and score one page snapshot.

    The three stages only read the snapshot and are joined in a fixed order
    (cookies, trackers, domains), so the result is reproducible.
    """
    database = database or load_signature_database()
    weights = weights or DEFAULT_WEIGHTS

    cookies = classify_cookies(snapshot.cookies, database)
    matches = match_trackers(snapshot.resources, database)
    # Domains are judged against the URL that was asked for, not the redirect target
    domains = analyze_domains(snapshot.url, snapshot.resources)

    penalty = compute_penalty(cookies, matches, domains.third_party_count, weights)
    score = score_from_penalty(penalty.total)
    rating = get_rating(score)
    logger.debug(
        "Penalty cookies=%d trackers=%d domains=%d -> score %d (%s)",
        penalty.cookies,
        penalty.trackers,
        penalty.domains,
        score,
        rating,
    )

    return AnalysisResult(
        url=snapshot.url,
        cookies=tuple(cookies),
        tracker_matches=tuple(matches),
        domains=domains,
        score=score,
        rating=rating,
        penalty=penalty,
    )
