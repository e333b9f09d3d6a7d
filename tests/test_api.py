"""Tests for the /search and /listings API endpoints.

The app is built around a stub session and the pipeline functions are
patched where each router imports them, so no network calls are made.
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from stayscout.airbnb import results
from stayscout.airbnb.results import ToolResult
from stayscout.api.app import create_app

_SEARCH_OK = ToolResult(payload={
    "searchUrl": "https://www.airbnb.ca/s/Paris/homes",
    "searchResults": [{"url": "https://www.airbnb.ca/rooms/1", "listing": {"id": "1"}}],
    "paginationInfo": {},
})


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def session():
    return MagicMock(name="AirbnbSession")


@pytest.fixture()
def client(session):
    """TestClient whose lifespan adopts the stub session instead of warming a real one."""
    with TestClient(create_app(session=session), raise_server_exceptions=True) as c:
        yield c


# ---------------------------------------------------------------------------
# /search
# ---------------------------------------------------------------------------

class TestSearchEndpoint:
    def test_success(self, client, session):
        with patch("stayscout.api.routers.search.search_listings", return_value=_SEARCH_OK) as mock_search:
            resp = client.get("/search", params={"location": "Paris", "adults": "2"})

        assert resp.status_code == 200
        assert resp.json() == _SEARCH_OK.payload

        called_session, params = mock_search.call_args.args
        assert called_session is session
        assert params.location == "Paris"
        assert params.adults == 2

    def test_wire_names(self, client):
        with patch("stayscout.api.routers.search.search_listings", return_value=_SEARCH_OK) as mock_search:
            client.get(
                "/search",
                params={"placeId": "abc", "minPrice": "50", "maxPrice": "200", "ignoreRobotsText": "true"},
            )

        params = mock_search.call_args.args[1]
        assert params.place_id == "abc"
        assert params.min_price == 50
        assert params.max_price == 200
        assert params.ignore_robots_text is True

    def test_invalid_guest_count_falls_back_to_default(self, client):
        with patch("stayscout.api.routers.search.search_listings", return_value=_SEARCH_OK) as mock_search:
            resp = client.get("/search", params={"location": "Paris", "adults": "lots", "pets": "-3"})

        assert resp.status_code == 200
        params = mock_search.call_args.args[1]
        assert params.adults == 1
        assert params.pets == 0

    def test_location_or_place_id_required(self, client):
        with patch("stayscout.api.routers.search.search_listings") as mock_search:
            resp = client.get("/search", params={"adults": "2"})

        assert resp.status_code == 422
        mock_search.assert_not_called()

    def test_policy_denial_is_forbidden(self, client):
        denied = ToolResult.failure(results.POLICY, "robots.txt says no", searchUrl="u")
        with patch("stayscout.api.routers.search.search_listings", return_value=denied):
            resp = client.get("/search", params={"location": "Paris"})

        assert resp.status_code == 403
        assert resp.json() == {"error": "robots.txt says no", "searchUrl": "u"}

    @pytest.mark.parametrize("kind", [results.TRANSPORT, results.REDIRECT, results.EXTRACTION])
    def test_upstream_failures_are_bad_gateway(self, client, kind):
        failed = ToolResult.failure(kind, "upstream trouble", searchUrl="u")
        with patch("stayscout.api.routers.search.search_listings", return_value=failed):
            resp = client.get("/search", params={"location": "Paris"})

        assert resp.status_code == 502
        assert resp.json()["error"] == "upstream trouble"


# ---------------------------------------------------------------------------
# /listings/{id}
# ---------------------------------------------------------------------------

class TestListingEndpoint:
    def test_success(self, client, session):
        ok = ToolResult(payload={"listingUrl": "https://www.airbnb.ca/rooms/48516", "details": []})
        with patch("stayscout.api.routers.listings.get_listing_details", return_value=ok) as mock_details:
            resp = client.get("/listings/48516", params={"checkin": "2025-07-01", "adults": "3"})

        assert resp.status_code == 200
        assert resp.json() == ok.payload

        called_session, params = mock_details.call_args.args
        assert called_session is session
        assert params.id == "48516"
        assert params.checkin == "2025-07-01"
        assert params.adults == 3

    def test_extraction_failure(self, client):
        failed = ToolResult.failure(results.EXTRACTION, "no state", listingUrl="u")
        with patch("stayscout.api.routers.listings.get_listing_details", return_value=failed):
            resp = client.get("/listings/1")

        assert resp.status_code == 502
        assert resp.json() == {"error": "no state", "listingUrl": "u"}


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------

def test_lifespan_initializes_a_session_when_none_given():
    with patch("stayscout.api.app.AirbnbSession") as session_cls:
        with TestClient(create_app()) as c:
            assert c.app.state.session is session_cls.return_value

    session_cls.return_value.initialize.assert_called_once()
