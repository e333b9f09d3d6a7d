"""Search pipeline.

``search_listings`` turns a set of search parameters into a list of listing
summaries:

    build URL → robots check → warm-up → fetch → embedded state →
    clean → pick → flatten → add direct links
"""

from __future__ import annotations

import sys
from typing import Any, Mapping, Union

import httpx

from stayscout.airbnb import results
from stayscout.airbnb.params import SearchParams
from stayscout.airbnb.results import ToolResult
from stayscout.airbnb.schemas import SEARCH_RESULT_SCHEMA
from stayscout.airbnb.session import AirbnbSession
from stayscout.airbnb.urls import build_search_url, request_path
from stayscout.errors import ExtractionError, RedirectError
from stayscout.projector import clean, flatten_arrays_in_object, pick_by_schema
from stayscout.scraper.extractor import PRESENTATION_PATH, descend, extract_embedded_state
from stayscout.scraper.models import RawPage
from stayscout.scraper.robots import ROBOTS_ERROR_MESSAGE

SEARCH_RESULTS_PATH = PRESENTATION_PATH + ("staysSearch", "results")


def _shape_result(result: Any, base_url: str) -> dict[str, Any]:
    projected = flatten_arrays_in_object(pick_by_schema(result, SEARCH_RESULT_SCHEMA))
    if not isinstance(projected, dict):
        raise ExtractionError(f"Unexpected search result of type {type(projected).__name__}")

    listing = projected.get("listing")
    listing_id = listing.get("id") if isinstance(listing, dict) else None
    if listing_id is None:
        return projected
    return {"url": f"{base_url}/rooms/{listing_id}", **projected}


def parse_search_page(page: RawPage, base_url: str) -> dict[str, Any]:
    """Extract ``searchResults`` and ``paginationInfo`` from a search page.

    Raises:
        ExtractionError: The page does not carry search results.
    """
    stays = descend(extract_embedded_state(page), SEARCH_RESULTS_PATH)
    if not isinstance(stays, dict):
        raise ExtractionError("Search results in embedded state are not an object")

    clean(stays)
    raw_results = stays.get("searchResults", [])
    if not isinstance(raw_results, list):
        raise ExtractionError("'searchResults' in embedded state is not a list")

    return {
        "searchResults": [_shape_result(result, base_url) for result in raw_results],
        "paginationInfo": stays.get("paginationInfo", {}),
    }


def search_listings(
    session: AirbnbSession,
    params: Union[SearchParams, Mapping[str, Any]],
) -> ToolResult:
    """Run a search and return the projected results.

    *params* may be a :class:`SearchParams` or a mapping of wire-format
    arguments (validated here).  Policy denials and fetch/parse failures are
    returned as error results carrying ``searchUrl``; they are never raised.
    """
    if not isinstance(params, SearchParams):
        params = SearchParams.model_validate(params)

    search_url = build_search_url(params, session.base_url)

    if not session.is_path_allowed(request_path(search_url), params.ignore_robots_text):
        return ToolResult.failure(results.POLICY, ROBOTS_ERROR_MESSAGE, searchUrl=search_url)

    print(f"[SEARCH] {search_url}", file=sys.stderr)
    try:
        session.warm_up()
        page = session.client.fetch(search_url)
        extracted = parse_search_page(page, session.base_url)
    except RedirectError as exc:
        return _failure(results.REDIRECT, exc, search_url)
    except httpx.HTTPError as exc:
        return _failure(results.TRANSPORT, exc, search_url)
    except ExtractionError as exc:
        return _failure(results.EXTRACTION, exc, search_url)

    print(f"[SEARCH] ✓ {len(extracted['searchResults'])} result(s).", file=sys.stderr)
    return ToolResult(payload={"searchUrl": search_url, **extracted})


def _failure(kind: str, exc: Exception, search_url: str) -> ToolResult:
    print(f"[SEARCH] ✗ Failed {search_url!r}: {exc}", file=sys.stderr)
    return ToolResult.failure(kind, str(exc), searchUrl=search_url)
