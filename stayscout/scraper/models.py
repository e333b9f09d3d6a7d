"""Data models for the scraper layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass
class RawPage:
    """The final HTTP response for a single fetch, after redirects."""

    url: str
    html: str
    status_code: int
    redirects: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300
