"""Signature database: known cookie-name patterns and tracker signatures."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, field_validator

from cookie_scout.core.base import (
    CATEGORY_PRIORITY,
    CookieCategory,
    TrackerMatch,
    TrackerSignature,
)
from cookie_scout.core.exceptions import SignatureError
from cookie_scout.core.paths import SIGNATURES_PATH

logger = logging.getLogger(__name__)

_CATEGORY_KEYS: dict[str, CookieCategory] = {c.value.lower(): c for c in CATEGORY_PRIORITY}


class CookiePatterns(BaseModel):
    """Name patterns for one cookie category. All comparisons are lowercase."""

    model_config = ConfigDict(frozen=True)

    exact: frozenset[str] = frozenset()
    prefix: tuple[str, ...] = ()
    contains: tuple[str, ...] = ()

    @field_validator("exact", "prefix", "contains", mode="before")
    @classmethod
    def _lowercase(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, str):
            value = [value]
        return [str(v).lower() for v in value if str(v).strip()]

    def matches(self, name: str) -> bool:
        """Check a lowercased cookie name against these patterns."""
        if name in self.exact:
            return True
        if name.startswith(self.prefix):
            return True
        return any(fragment in name for fragment in self.contains)


class SignatureDatabase:
    """Read-only table of cookie patterns and tracker signatures.

    Built once and shared by reference; there is no way to add or remove
    entries after construction.
    """

    def __init__(
        self,
        cookie_patterns: Mapping[CookieCategory, CookiePatterns],
        trackers: Iterable[TrackerSignature],
    ) -> None:
        invalid = [c for c in cookie_patterns if c not in CATEGORY_PRIORITY]
        if invalid:
            raise SignatureError(f"Cookie patterns cannot target category: {invalid[0]}")

        # Stored in resolution order so lookup is a single ordered walk
        self._cookie_patterns: tuple[tuple[CookieCategory, CookiePatterns], ...] = tuple(
            (category, cookie_patterns[category])
            for category in CATEGORY_PRIORITY
            if category in cookie_patterns
        )
        self._trackers: tuple[TrackerSignature, ...] = tuple(trackers)

    @property
    def trackers(self) -> tuple[TrackerSignature, ...]:
        return self._trackers

    def cookie_patterns(self, category: CookieCategory) -> CookiePatterns | None:
        for cat, patterns in self._cookie_patterns:
            if cat == category:
                return patterns
        return None

    def lookup_cookie(self, name: Any) -> CookieCategory:
        """Return the category of a cookie name.

        The first category in priority order with a matching pattern wins.
        Names that match nothing (or are not usable names at all) are
        Unknown, never Essential.
        """
        if not isinstance(name, str):
            return CookieCategory.UNKNOWN
        lowered = name.strip().lower()
        if not lowered:
            return CookieCategory.UNKNOWN

        for category, patterns in self._cookie_patterns:
            if patterns.matches(lowered):
                return category
        return CookieCategory.UNKNOWN

    def find_tracker_matches(self, resources: Iterable[str]) -> list[TrackerMatch]:
        """Match every signature against every resource identifier.

        A resource can trigger several signatures and a signature can fire on
        several resources; each distinct (signature, resource) pair is kept
        once, in order of first occurrence.
        """
        matches: list[TrackerMatch] = []
        seen: set[tuple[TrackerSignature, str]] = set()

        for resource in resources:
            for signature in self._trackers:
                key = (signature, resource)
                if key in seen or not signature.matches(resource):
                    continue
                seen.add(key)
                matches.append(TrackerMatch(signature=signature, resource=resource))

        return matches


def parse_signature_data(data: Mapping[str, Any]) -> SignatureDatabase:
    """Build a database from the parsed YAML structure."""
    if not isinstance(data, Mapping):
        raise SignatureError("Signature table must be a mapping")

    cookie_section = data.get("cookies") or {}
    tracker_section = data.get("trackers") or []

    try:
        cookie_patterns: dict[CookieCategory, CookiePatterns] = {}
        for key, patterns in cookie_section.items():
            category = _CATEGORY_KEYS.get(str(key).lower())
            if category is None:
                raise SignatureError(f"Unknown cookie category in signature table: {key}")
            cookie_patterns[category] = CookiePatterns.model_validate(patterns or {})

        trackers = [TrackerSignature.model_validate(entry) for entry in tracker_section]
    except (ValueError, TypeError, AttributeError) as e:
        # pydantic's ValidationError is a ValueError
        raise SignatureError(f"Invalid signature table: {e}") from e

    return SignatureDatabase(cookie_patterns, trackers)


@lru_cache(maxsize=None)
def _load_from_path(path: Path) -> SignatureDatabase:
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise SignatureError(f"Cannot read signature table {path}: {e}") from e

    database = parse_signature_data(data or {})
    logger.debug(
        "Loaded %d tracker signatures from %s",
        len(database.trackers),
        path,
    )
    return database


def load_signature_database(path: Path | None = None) -> SignatureDatabase:
    """Load (once per path) the signature database.

    Defaults to the table bundled with the package.
    """
    return _load_from_path(Path(path or SIGNATURES_PATH).resolve())
