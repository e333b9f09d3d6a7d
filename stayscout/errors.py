"""Exception types raised by the scraping layer.

Transport problems (DNS, connection resets, timeouts) are *not* wrapped:
they surface as the underlying ``httpx.TransportError`` subclasses.  The
classes below cover the cases where the site answered, but not in a way we
can use.
"""

from __future__ import annotations


class ScraperError(Exception):
    """Base class for every error raised by :mod:`stayscout`."""


class RedirectError(ScraperError):
    """The site's redirect chain could not be followed."""

    def __init__(self, message: str, url: str) -> None:
        super().__init__(message)
        self.url = url


class TooManyRedirects(RedirectError):
    """More redirects than ``settings.max_redirects`` were issued."""


class MissingLocationHeader(RedirectError):
    """A redirect status code arrived without a ``Location`` header."""

    def __init__(self, message: str, url: str, status_code: int) -> None:
        super().__init__(message, url)
        self.status_code = status_code


class InvalidRedirectLocation(RedirectError):
    """A redirect carried a ``Location`` header that is not a valid URL."""


class ExtractionError(ScraperError):
    """The fetched page did not contain the expected embedded JSON payload."""
