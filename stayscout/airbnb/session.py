"""Browser session shared by every pipeline call in a process.

A session bundles the :class:`BrowserHttpClient` (and therefore the cookie
jar and the fixed user agent) with the robots.txt policy evaluated for that
user agent.  Hosting processes create one session at start-up and pass it to
each pipeline call; tests build their own.
"""

from __future__ import annotations

import random
import sys
import time
from typing import Optional

import httpx

from stayscout.config import settings
from stayscout.errors import ScraperError
from stayscout.scraper.fetcher import BrowserHttpClient
from stayscout.scraper.models import RawPage
from stayscout.scraper.robots import RobotsPolicy


class AirbnbSession:
    def __init__(
        self,
        client: Optional[BrowserHttpClient] = None,
        robots: Optional[RobotsPolicy] = None,
        base_url: Optional[str] = None,
        ignore_robots_txt: Optional[bool] = None,
    ) -> None:
        self.base_url = (base_url or settings.base_url).rstrip("/")
        self.client = client or BrowserHttpClient()
        if ignore_robots_txt is None:
            ignore_robots_txt = settings.ignore_robots_txt
        self.robots = robots or RobotsPolicy(self.client.user_agent, ignore=ignore_robots_txt)

    @property
    def robots_url(self) -> str:
        return f"{self.base_url}/robots.txt"

    def warm_up(self) -> RawPage:
        """Visit the site root so the anti-automation cookies are in the jar."""
        return self.client.fetch(self.base_url)

    def initialize(self) -> bool:
        """Warm the session and load robots.txt.

        Failures are logged and swallowed: a process that cannot reach the
        site at start-up still serves requests, each of which warms the
        session again.  Returns ``True`` when the warm-up succeeded.
        """
        print("[SESSION] Initializing browser session …", file=sys.stderr)
        try:
            self.warm_up()
        except (httpx.HTTPError, ScraperError) as exc:
            print(f"[SESSION] Error initializing browser session: {exc}", file=sys.stderr)
            return False
        finally:
            self.robots.load(self.client, self.robots_url)

        print("[SESSION] Browser session initialized successfully", file=sys.stderr)
        return True

    def is_path_allowed(self, path: str, ignore_robots_text: bool = False) -> bool:
        return ignore_robots_text or self.robots.is_path_allowed(path)

    def pause(self) -> None:
        """Human-scale pause between navigating from one page to the next."""
        time.sleep(settings.navigation_delay_min + random.random() * settings.navigation_delay_jitter)
