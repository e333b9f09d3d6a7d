"""Search endpoint.

Routes
------
GET /search?location=Paris&checkin=2025-07-01&checkout=2025-07-05&adults=2
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from stayscout.airbnb.params import SearchParams
from stayscout.airbnb.search import search_listings
from stayscout.airbnb.session import AirbnbSession
from stayscout.api.deps import get_session, to_response

router = APIRouter()


@router.get("")
def search(
    location: Optional[str] = None,
    place_id: Optional[str] = Query(None, alias="placeId"),
    checkin: Optional[str] = None,
    checkout: Optional[str] = None,
    adults: Optional[str] = None,
    children: Optional[str] = None,
    infants: Optional[str] = None,
    pets: Optional[str] = None,
    min_price: Optional[float] = Query(None, alias="minPrice"),
    max_price: Optional[float] = Query(None, alias="maxPrice"),
    cursor: Optional[str] = None,
    ignore_robots_text: bool = Query(False, alias="ignoreRobotsText"),
    session: AirbnbSession = Depends(get_session),
) -> JSONResponse:
    """Search listings.

    Guest counts are taken as strings and coerced the same way tool
    arguments are (invalid → default, negative → 0).
    """
    try:
        params = SearchParams(
            location=location,
            place_id=place_id,
            checkin=checkin,
            checkout=checkout,
            adults=adults,
            children=children,
            infants=infants,
            pets=pets,
            min_price=min_price,
            max_price=max_price,
            cursor=cursor,
            ignore_robots_text=ignore_robots_text,
        )
    except ValidationError as exc:
        raise HTTPException(
            status_code=422, detail=exc.errors(include_url=False, include_context=False)
        ) from exc

    return to_response(search_listings(session, params))
