"""Airbnb extraction pipelines."""

from stayscout.airbnb.listing import get_listing_details
from stayscout.airbnb.params import ListingParams, SearchParams
from stayscout.airbnb.results import ToolResult
from stayscout.airbnb.search import search_listings
from stayscout.airbnb.session import AirbnbSession

__all__ = [
    "AirbnbSession",
    "SearchParams",
    "ListingParams",
    "ToolResult",
    "search_listings",
    "get_listing_details",
]
