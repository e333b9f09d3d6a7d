"""Embedded-state extraction: turns a :class:`RawPage` into parsed JSON.

Airbnb server-renders its page state into a ``<script>`` element as one
large JSON document.  The functions here locate that element, parse it, and
walk a fixed key path down to the part a pipeline cares about.
"""

from __future__ import annotations

import json
from typing import Any, Sequence, Union

from bs4 import BeautifulSoup

from stayscout.errors import ExtractionError
from stayscout.scraper.models import RawPage

DEFERRED_STATE_SCRIPT_ID = "data-deferred-state-0"

# Path from the deferred-state document to the ``presentation`` object that
# both search and listing pages hang their data off.
PRESENTATION_PATH: tuple[Union[str, int], ...] = (
    "niobeMinimalClientData", 0, 1, "data", "presentation",
)


def extract_embedded_state(raw: RawPage, script_id: str = DEFERRED_STATE_SCRIPT_ID) -> Any:
    """Return the parsed JSON content of the ``<script id=script_id>`` element.

    Raises:
        ExtractionError: The element is missing, empty, or not valid JSON.
    """
    soup = BeautifulSoup(raw.html, "html.parser")
    script = soup.find("script", id=script_id)
    if script is None:
        raise ExtractionError(
            f"Embedded state script #{script_id} not found in {raw.url} (HTTP {raw.status_code})"
        )

    text = script.get_text()
    if not text.strip():
        raise ExtractionError(f"Embedded state script #{script_id} is empty")

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ExtractionError(f"Embedded state script #{script_id} is not valid JSON: {exc}") from exc


def descend(data: Any, path: Sequence[Union[str, int]]) -> Any:
    """Follow *path* (dict keys and list indices) into *data*.

    Raises:
        ExtractionError: A step of the path is missing.
    """
    current = data
    for depth, step in enumerate(path):
        try:
            current = current[step]
        except (KeyError, IndexError, TypeError):
            walked = ".".join(str(s) for s in path[:depth]) or "<root>"
            raise ExtractionError(f"Expected {step!r} under {walked} in embedded state") from None
    return current
