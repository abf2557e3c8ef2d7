"""Shared test fixtures."""

import pytest

from cookie_scout.core.base import ClassifiedCookie, Cookie, CookieCategory, TrackerSignature
from cookie_scout.core.signatures import load_signature_database


@pytest.fixture
def database():
    """The signature table bundled with the package."""
    return load_signature_database()


@pytest.fixture
def make_cookies():
    """Build classified cookies from (name, category) pairs."""

    def _make(*pairs: tuple[str, CookieCategory]) -> list[ClassifiedCookie]:
        return [ClassifiedCookie(cookie=Cookie(name=name), category=cat) for name, cat in pairs]

    return _make


@pytest.fixture
def make_signature():
    """Build a minimal substring tracker signature."""

    def _make(pattern: str, category: str = "Analytics") -> TrackerSignature:
        return TrackerSignature(
            pattern=pattern,
            vendor="Test Vendor",
            category=category,
            description=f"{pattern} tracker",
        )

    return _make
