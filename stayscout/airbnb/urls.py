"""Target URL construction for search and listing pages."""

from __future__ import annotations

from typing import Optional
from urllib.parse import quote, urlencode, urlsplit

from stayscout.airbnb.params import ListingParams, SearchParams, StayParams
from stayscout.config import settings


def _base(base_url: Optional[str]) -> str:
    return (base_url or settings.base_url).rstrip("/")


def _format_price(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def _guest_query(params: StayParams) -> list[tuple[str, str]]:
    """All four guest counts, or nothing when there are no adults or children."""
    if not params.has_guests:
        return []
    return [
        ("adults", str(params.adults)),
        ("children", str(params.children)),
        ("infants", str(params.infants)),
        ("pets", str(params.pets)),
    ]


def _with_query(url: str, query: list[tuple[str, str]]) -> str:
    return f"{url}?{urlencode(query)}" if query else url


def build_search_url(params: SearchParams, base_url: Optional[str] = None) -> str:
    """``<base>/s/<location>/homes`` plus the filters present in *params*.

    With only a place id, the location segment is left out (``/s/homes``).
    """
    if params.location:
        path = f"/s/{quote(params.location, safe='')}/homes"
    else:
        path = "/s/homes"

    query: list[tuple[str, str]] = []
    if params.place_id:
        query.append(("place_id", params.place_id))
    if params.checkin:
        query.append(("checkin", params.checkin))
    if params.checkout:
        query.append(("checkout", params.checkout))
    query.extend(_guest_query(params))
    if params.min_price:
        query.append(("price_min", _format_price(params.min_price)))
    if params.max_price:
        query.append(("price_max", _format_price(params.max_price)))
    if params.cursor:
        query.append(("cursor", params.cursor))

    return _with_query(_base(base_url) + path, query)


def build_listing_url(params: ListingParams, base_url: Optional[str] = None) -> str:
    """``<base>/rooms/<id>`` plus dates and guests."""
    query: list[tuple[str, str]] = []
    if params.checkin:
        query.append(("check_in", params.checkin))
    if params.checkout:
        query.append(("check_out", params.checkout))
    query.extend(_guest_query(params))

    return _with_query(f"{_base(base_url)}/rooms/{quote(params.id, safe='')}", query)


def request_path(url: str) -> str:
    """Path plus query string of *url*, as matched against robots.txt."""
    parts = urlsplit(url)
    return f"{parts.path}?{parts.query}" if parts.query else parts.path
