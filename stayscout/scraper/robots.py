"""robots.txt parsing and access-policy checks.

The parser never raises, and anything it does not understand is skipped.
An empty ruleset (no body, unreachable robots.txt, nothing but comments)
allows every path.

Matching follows the usual precedence rules:

* the group whose ``User-agent`` equals the client's product token
  (``"mozilla"`` for ``"Mozilla/5.0 (...)"``) wins over the ``*`` group;
* within a group, the longest matching ``Allow``/``Disallow`` pattern
  decides, and ``Allow`` wins a tie;
* ``*`` matches any run of characters and a trailing ``$`` anchors the
  pattern at the end of the path.
"""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Mapping, Optional, Pattern, Tuple
from urllib.parse import unquote, urlsplit

import httpx

from stayscout.errors import ScraperError

if TYPE_CHECKING:
    from stayscout.scraper.fetcher import BrowserHttpClient

ROBOTS_ERROR_MESSAGE = (
    "This path is disallowed by Airbnb's robots.txt to this User-agent. "
    "You may or may not want to run the server with '--ignore-robots-txt' args"
)

_WILDCARD_AGENT = "*"


# ---------------------------------------------------------------------------
# Ruleset model
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RobotsRule:
    """A single ``Allow`` or ``Disallow`` line."""

    allow: bool
    pattern: str
    regex: Pattern[str] = field(compare=False, repr=False)

    @classmethod
    def from_pattern(cls, allow: bool, pattern: str) -> RobotsRule:
        return cls(allow=allow, pattern=pattern, regex=_compile_pattern(pattern))

    def matches(self, path: str) -> bool:
        return self.regex.match(path) is not None


@dataclass(frozen=True)
class RobotsRuleSet:
    """Parsed representation of a robots.txt body.  Immutable once built."""

    groups: Mapping[str, Tuple[RobotsRule, ...]] = field(default_factory=dict)
    crawl_delays: Mapping[str, float] = field(default_factory=dict)
    sitemaps: Tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not any(self.groups.values())

    def rules_for(self, user_agent: str) -> Tuple[RobotsRule, ...]:
        """Rules of the group matching *user_agent*, falling back to ``*``."""
        token = _product_token(user_agent)
        if token in self.groups:
            return self.groups[token]
        return self.groups.get(_WILDCARD_AGENT, ())

    def crawl_delay(self, user_agent: str) -> Optional[float]:
        token = _product_token(user_agent)
        if token in self.crawl_delays:
            return self.crawl_delays[token]
        return self.crawl_delays.get(_WILDCARD_AGENT)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _product_token(user_agent: str) -> str:
    """``"Mozilla/5.0 (X11; ...)"`` -> ``"mozilla"``; ``"*"`` stays ``"*"``."""
    return user_agent.split("/", 1)[0].strip().lower()


def _compile_pattern(pattern: str) -> Pattern[str]:
    anchored = pattern.endswith("$")
    if anchored:
        pattern = pattern[:-1]
    regex = ".*".join(re.escape(part) for part in unquote(pattern).split("*"))
    return re.compile(regex + ("$" if anchored else ""))


def _normalise_path(path: str) -> str:
    """Reduce a URL or path to a percent-decoded ``/path?query`` string."""
    parts = urlsplit(path)
    normalised = parts.path or "/"
    if not normalised.startswith("/"):
        normalised = "/" + normalised
    if parts.query:
        normalised += "?" + parts.query
    return unquote(normalised)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_robots(body: Optional[str]) -> RobotsRuleSet:
    """Parse a robots.txt *body*.  Never raises; junk lines are ignored.

    Rules that appear before any ``User-agent`` line are filed under ``*``.
    """
    groups: dict[str, list[RobotsRule]] = {}
    crawl_delays: dict[str, float] = {}
    sitemaps: list[str] = []

    current_agents: list[str] = []
    seen_directive = False

    for raw_line in (body or "").splitlines():
        line = raw_line.split("#", 1)[0].strip()
        name, sep, value = line.partition(":")
        if not sep:
            continue
        name = name.strip().lower()
        value = value.strip()

        if name == "user-agent":
            # A User-agent line after directives starts a new group.
            if seen_directive:
                current_agents = []
                seen_directive = False
            if value:
                agent = _product_token(value)
                current_agents.append(agent)
                groups.setdefault(agent, [])
        elif name in ("allow", "disallow"):
            seen_directive = True
            if not value:
                # "Disallow:" with no pattern allows everything.
                continue
            rule = RobotsRule.from_pattern(allow=(name == "allow"), pattern=value)
            for agent in current_agents or [_WILDCARD_AGENT]:
                groups.setdefault(agent, []).append(rule)
        elif name == "crawl-delay":
            seen_directive = True
            try:
                delay = float(value)
            except ValueError:
                continue
            for agent in current_agents or [_WILDCARD_AGENT]:
                crawl_delays.setdefault(agent, delay)
        elif name == "sitemap" and value:
            sitemaps.append(value)

    return RobotsRuleSet(
        groups={agent: tuple(rules) for agent, rules in groups.items()},
        crawl_delays=crawl_delays,
        sitemaps=tuple(sitemaps),
    )


def is_allowed(ruleset: RobotsRuleSet, path: str, user_agent: str) -> bool:
    """Return ``True`` if *user_agent* may fetch *path* under *ruleset*."""
    if ruleset.is_empty:
        return True

    target = _normalise_path(path)
    best: Optional[RobotsRule] = None
    for rule in ruleset.rules_for(user_agent):
        if not rule.matches(target):
            continue
        if (
            best is None
            or len(rule.pattern) > len(best.pattern)
            or (len(rule.pattern) == len(best.pattern) and rule.allow)
        ):
            best = rule

    return best is None or best.allow


class RobotsPolicy:
    """Session-level robots.txt policy for the target site.

    The policy is advisory: it reports whether a path is allowed and logs a
    diagnostic when it is not, but the decision to skip a request belongs to
    the caller.
    """

    def __init__(
        self,
        user_agent: str,
        ruleset: Optional[RobotsRuleSet] = None,
        ignore: bool = False,
    ) -> None:
        self.user_agent = user_agent
        self.ruleset = ruleset or RobotsRuleSet()
        self.ignore = ignore

    def load(self, client: BrowserHttpClient, robots_url: str) -> None:
        """Fetch and parse robots.txt through *client*.

        Any failure leaves the policy permissive.
        """
        if self.ignore:
            return

        try:
            page = client.fetch(robots_url)
        except (httpx.HTTPError, ScraperError) as exc:
            print(f"[ROBOTS] Error fetching robots.txt: {exc}", file=sys.stderr)
            self.ruleset = RobotsRuleSet()
            return

        if not page.ok:
            print(
                f"[ROBOTS] robots.txt returned HTTP {page.status_code}; allowing all paths.",
                file=sys.stderr,
            )
            self.ruleset = RobotsRuleSet()
            return

        self.ruleset = parse_robots(page.html)

    def is_path_allowed(self, path: str) -> bool:
        if self.ignore:
            return True
        allowed = is_allowed(self.ruleset, path, self.user_agent)
        if not allowed:
            print(f"[ROBOTS] {ROBOTS_ERROR_MESSAGE} (path={path!r})", file=sys.stderr)
        return allowed

    def crawl_delay(self) -> Optional[float]:
        return self.ruleset.crawl_delay(self.user_agent)
