"""Scraper package: browser-like fetching, robots.txt, embedded-state extraction."""

from stayscout.scraper.cookies import CookieJar
from stayscout.scraper.extractor import descend, extract_embedded_state
from stayscout.scraper.fetcher import BrowserHttpClient
from stayscout.scraper.models import RawPage
from stayscout.scraper.robots import RobotsPolicy, RobotsRuleSet, is_allowed, parse_robots

__all__ = [
    "BrowserHttpClient",
    "CookieJar",
    "RawPage",
    "RobotsPolicy",
    "RobotsRuleSet",
    "parse_robots",
    "is_allowed",
    "extract_embedded_state",
    "descend",
]
