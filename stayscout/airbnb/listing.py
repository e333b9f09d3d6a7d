"""Listing-details pipeline.

``get_listing_details`` fetches one listing page and keeps only the page
sections named in :data:`~stayscout.airbnb.schemas.LISTING_SECTION_SCHEMAS`.
"""

from __future__ import annotations

import sys
from typing import Any, Mapping, Union

import httpx

from stayscout.airbnb import results
from stayscout.airbnb.params import ListingParams
from stayscout.airbnb.results import ToolResult
from stayscout.airbnb.schemas import LISTING_SECTION_SCHEMAS
from stayscout.airbnb.session import AirbnbSession
from stayscout.airbnb.urls import build_listing_url, request_path
from stayscout.errors import ExtractionError, RedirectError
from stayscout.projector import clean, flatten_arrays_in_object, pick_by_schema
from stayscout.scraper.extractor import PRESENTATION_PATH, descend, extract_embedded_state
from stayscout.scraper.models import RawPage
from stayscout.scraper.robots import ROBOTS_ERROR_MESSAGE

SECTIONS_PATH = PRESENTATION_PATH + ("stayProductDetailPage", "sections", "sections")


def parse_listing_page(page: RawPage) -> list[dict[str, Any]]:
    """Return ``[{"id": sectionId, ...projected fields}]`` for the allowed sections.

    Raises:
        ExtractionError: The page does not carry a section list.
    """
    sections = descend(extract_embedded_state(page), SECTIONS_PATH)
    if not isinstance(sections, list):
        raise ExtractionError("Listing sections in embedded state are not a list")

    details: list[dict[str, Any]] = []
    for section in sections:
        if not isinstance(section, dict):
            continue
        clean(section)
        section_id = section.get("sectionId")
        schema = LISTING_SECTION_SCHEMAS.get(section_id) if isinstance(section_id, str) else None
        if schema is None:
            continue
        projected = flatten_arrays_in_object(pick_by_schema(section.get("section", {}), schema))
        if not isinstance(projected, dict):
            projected = {}
        details.append({"id": section_id, **projected})
    return details


def get_listing_details(
    session: AirbnbSession,
    params: Union[ListingParams, Mapping[str, Any]],
) -> ToolResult:
    """Fetch a listing page and return its projected sections.

    *params* may be a :class:`ListingParams` or a mapping of wire-format
    arguments.  Failures are returned as error results carrying
    ``listingUrl``.
    """
    if not isinstance(params, ListingParams):
        params = ListingParams.model_validate(params)

    listing_url = build_listing_url(params, session.base_url)

    if not session.is_path_allowed(request_path(listing_url), params.ignore_robots_text):
        return ToolResult.failure(results.POLICY, ROBOTS_ERROR_MESSAGE, listingUrl=listing_url)

    print(f"[LISTING] {listing_url}", file=sys.stderr)
    try:
        session.warm_up()
        session.pause()
        # Arrive from a search page, as a person clicking a result would.
        page = session.client.fetch(
            listing_url,
            headers={"Referer": f"{session.base_url}/s/homes"},
        )
        details = parse_listing_page(page)
    except RedirectError as exc:
        return _failure(results.REDIRECT, exc, listing_url)
    except httpx.HTTPError as exc:
        return _failure(results.TRANSPORT, exc, listing_url)
    except ExtractionError as exc:
        return _failure(results.EXTRACTION, exc, listing_url)

    print(f"[LISTING] ✓ {len(details)} section(s).", file=sys.stderr)
    return ToolResult(payload={"listingUrl": listing_url, "details": details})


def _failure(kind: str, exc: Exception, listing_url: str) -> ToolResult:
    print(f"[LISTING] ✗ Failed {listing_url!r}: {exc}", file=sys.stderr)
    return ToolResult.failure(kind, str(exc), listingUrl=listing_url)
