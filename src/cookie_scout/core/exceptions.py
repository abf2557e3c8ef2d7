"""Exception hierarchy for cookie-scout."""

from __future__ import annotations


class CookieScoutError(Exception):
    """Base class for every error raised by cookie-scout."""


class FetchError(CookieScoutError):
    """Raised when the target page cannot be retrieved or is not HTML."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Could not fetch {url}: {reason}")


class SignatureError(CookieScoutError):
    """Raised when a signature table cannot be loaded."""


class ConfigError(CookieScoutError):
    """Raised when the configuration file or environment holds invalid values."""
