"""Listing-details endpoint.

Routes
------
GET /listings/{listing_id}?checkin=2025-07-01&checkout=2025-07-05&adults=2
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from stayscout.airbnb.listing import get_listing_details
from stayscout.airbnb.params import ListingParams
from stayscout.airbnb.session import AirbnbSession
from stayscout.api.deps import get_session, to_response

router = APIRouter()


@router.get("/{listing_id}")
def listing_details(
    listing_id: str,
    checkin: Optional[str] = None,
    checkout: Optional[str] = None,
    adults: Optional[str] = None,
    children: Optional[str] = None,
    infants: Optional[str] = None,
    pets: Optional[str] = None,
    ignore_robots_text: bool = Query(False, alias="ignoreRobotsText"),
    session: AirbnbSession = Depends(get_session),
) -> JSONResponse:
    """Return the projected sections of one listing page."""
    try:
        params = ListingParams(
            id=listing_id,
            checkin=checkin,
            checkout=checkout,
            adults=adults,
            children=children,
            infants=infants,
            pets=pets,
            ignore_robots_text=ignore_robots_text,
        )
    except ValidationError as exc:
        raise HTTPException(
            status_code=422, detail=exc.errors(include_url=False, include_context=False)
        ) from exc

    return to_response(get_listing_details(session, params))
