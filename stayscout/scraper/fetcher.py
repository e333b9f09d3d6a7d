"""Browser-emulating HTTP client for the target site.

Every request carries the header set a desktop browser would send, a user
agent fixed for the lifetime of the client, and the cookies collected so far.
Redirects are followed by hand so that cookies set on intermediate hops end
up in the :class:`~stayscout.scraper.cookies.CookieJar`.
"""

from __future__ import annotations

import random
import sys
import time
from typing import Mapping, Optional

import httpx

from stayscout.config import settings
from stayscout.errors import InvalidRedirectLocation, MissingLocationHeader, TooManyRedirects
from stayscout.scraper.cookies import CookieJar
from stayscout.scraper.models import RawPage

# ---------------------------------------------------------------------------
# Browser fingerprint
# ---------------------------------------------------------------------------
DESKTOP_USER_AGENTS = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/123.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/123.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/123.0.0.0 Safari/537.36 Edg/123.0.0.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.3 Safari/605.1.15",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:125.0) Gecko/20100101 Firefox/125.0",
]

_COMMON_HEADERS = {
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,"
        "image/webp,image/apng,*/*;q=0.8,application/signed-exchange;v=b3;q=0.7"
    ),
    "Accept-Language": "en-US,en;q=0.9",
    "Accept-Encoding": "gzip, deflate, br",
    "Connection": "keep-alive",
    "Sec-Ch-Ua": '"Chromium";v="123", "Google Chrome";v="123", "Not:A-Brand";v="99"',
    "Sec-Ch-Ua-Mobile": "?0",
    "Sec-Ch-Ua-Platform": '"Windows"',
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "none",
    "Sec-Fetch-User": "?1",
    "Upgrade-Insecure-Requests": "1",
    "Cache-Control": "max-age=0",
    "TE": "trailers",
}

REDIRECT_STATUS_CODES = (301, 302, 307)


def random_user_agent() -> str:
    """Pick one of :data:`DESKTOP_USER_AGENTS` at random."""
    return random.choice(DESKTOP_USER_AGENTS)


class BrowserHttpClient:
    """HTTP client that looks like one consistent desktop browser session.

    Args:
        user_agent: Fixed user agent for every request.  Chosen at random from
            :data:`DESKTOP_USER_AGENTS` when omitted.
        cookie_jar: Jar shared by every request.  A fresh one by default.
        max_redirects: Redirect hops followed before giving up.
        delay_min: Minimum pause before each request, in seconds.
        delay_jitter: Upper bound of the random extra pause, in seconds.
        timeout: Per-request transport timeout, in seconds.
    """

    def __init__(
        self,
        user_agent: Optional[str] = None,
        cookie_jar: Optional[CookieJar] = None,
        max_redirects: Optional[int] = None,
        delay_min: Optional[float] = None,
        delay_jitter: Optional[float] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.user_agent = user_agent or random_user_agent()
        self.cookies = cookie_jar if cookie_jar is not None else CookieJar()
        self.max_redirects = settings.max_redirects if max_redirects is None else max_redirects
        self.delay_min = settings.request_delay_min if delay_min is None else delay_min
        self.delay_jitter = settings.request_delay_jitter if delay_jitter is None else delay_jitter
        self.timeout = settings.request_timeout if timeout is None else timeout

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _build_headers(
        self,
        url: httpx.URL,
        overrides: Optional[Mapping[str, str]] = None,
    ) -> httpx.Headers:
        origin = f"{url.scheme}://{url.netloc.decode('ascii')}"
        headers = httpx.Headers(_COMMON_HEADERS)
        headers["User-Agent"] = self.user_agent
        headers["Host"] = url.host
        headers["Referer"] = origin
        headers["Origin"] = origin

        cookie_header = self.cookies.serialize()
        if cookie_header:
            headers["Cookie"] = cookie_header

        if overrides:
            headers.update(overrides)
        return headers

    def _pace(self) -> None:
        """Sleep for a randomised interval so requests have no fixed rhythm."""
        time.sleep(self.delay_min + random.random() * self.delay_jitter)

    def _send(self, url: httpx.URL, headers: httpx.Headers) -> httpx.Response:
        # A fresh client per hop keeps httpx's own cookie store out of the
        # picture: the CookieJar is the only source of the Cookie header.
        with httpx.Client(timeout=self.timeout, follow_redirects=False) as client:
            return client.get(url, headers=headers)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def fetch(self, url: str, headers: Optional[Mapping[str, str]] = None) -> RawPage:
        """GET *url* and return the final, non-redirect response.

        Cookies from every response in the chain are recorded, whatever its
        status code.  Non-redirect status codes are returned untouched.

        Raises:
            TooManyRedirects: More than ``max_redirects`` redirects were issued.
            MissingLocationHeader: A 301/302/307 arrived without ``Location``.
            InvalidRedirectLocation: The ``Location`` header is not a valid URL.
            httpx.TransportError: The site could not be reached.
        """
        current = httpx.URL(url)
        redirects: list[str] = []

        while True:
            self._pace()
            try:
                response = self._send(current, self._build_headers(current, headers))
            except httpx.RemoteProtocolError as exc:
                # httpx resolves Location on every redirect response, even
                # when it is not following redirects itself.
                if "location header" not in str(exc).lower():
                    raise
                raise InvalidRedirectLocation(str(exc), str(current)) from exc
            self.cookies.record(response.headers.get_list("set-cookie"))

            if response.status_code not in REDIRECT_STATUS_CODES:
                return RawPage(
                    url=str(current),
                    html=response.text,
                    status_code=response.status_code,
                    redirects=redirects,
                )

            if len(redirects) >= self.max_redirects:
                raise TooManyRedirects(f"Too many redirects while fetching {current}", str(current))

            location = response.headers.get("location")
            if not location:
                raise MissingLocationHeader(
                    f"Redirect status {response.status_code} but no Location header",
                    str(current),
                    response.status_code,
                )

            try:
                current = current.join(location)
            except httpx.InvalidURL as exc:
                raise InvalidRedirectLocation(
                    f"Invalid URL in Location header {location!r}: {exc}", str(current)
                ) from exc
            redirects.append(str(current))
            print(f"[FETCH] Redirect {response.status_code} to {current}", file=sys.stderr)
