"""Cookie classifier: assign every cookie exactly one category."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable

from cookie_scout.core.base import ClassifiedCookie, Cookie, CookieCategory
from cookie_scout.core.signatures import SignatureDatabase

logger = logging.getLogger(__name__)


def classify_cookie(cookie: Cookie, database: SignatureDatabase) -> ClassifiedCookie:
    return ClassifiedCookie(cookie=cookie, category=database.lookup_cookie(cookie.name))


def classify_cookies(
    cookies: Iterable[Cookie], database: SignatureDatabase
) -> list[ClassifiedCookie]:
    """Classify cookies, keeping the input order."""
    classified = [classify_cookie(cookie, database) for cookie in cookies]

    if classified:
        counts = Counter(c.category for c in classified)
        logger.debug(
            "Classified %d cookies: %s",
            len(classified),
            ", ".join(f"{cat.value}={counts[cat]}" for cat in CookieCategory if counts[cat]),
        )
    return classified
