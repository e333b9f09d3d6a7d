"""Minimal session cookie jar for a single-origin client.

Only the ``name=value`` pair of each ``Set-Cookie`` entry is kept.  Domain,
path, expiry and secure attributes are ignored: every request goes to the
same origin and nothing outlives the process.
"""

from __future__ import annotations

from typing import Iterable


class CookieJar:
    """In-memory ``name -> value`` store, serialised back as a ``Cookie`` header."""

    def __init__(self) -> None:
        self._cookies: dict[str, str] = {}

    def record(self, set_cookie_values: Iterable[str]) -> None:
        """Store the cookies carried by a response's ``Set-Cookie`` entries.

        A cookie of the same name is overwritten.  Entries with an empty name
        or value are skipped.
        """
        for entry in set_cookie_values:
            main_part = entry.split(";", 1)[0]
            name, sep, value = main_part.partition("=")
            name, value = name.strip(), value.strip()
            if sep and name and value:
                self._cookies[name] = value

    def serialize(self) -> str:
        """Return ``name=value`` pairs joined by ``"; "`` (empty string if none).

        Iterates a snapshot: pipelines running in worker threads share the
        jar, and another thread may record a cookie mid-serialisation.
        """
        return "; ".join(f"{name}={value}" for name, value in tuple(self._cookies.items()))

    def get(self, name: str) -> str | None:
        return self._cookies.get(name)

    def __len__(self) -> int:
        return len(self._cookies)

    def __contains__(self, name: object) -> bool:
        return name in self._cookies
