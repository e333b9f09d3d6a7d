"""Tests for the stayscout CLI commands."""

import json
from unittest.mock import patch

import httpx
import pytest
import respx
from typer.testing import CliRunner

from cli.main import app
from stayscout.airbnb import results
from stayscout.airbnb.results import ToolResult
from stayscout.config import settings

runner = CliRunner()


@pytest.fixture(autouse=True)
def quiet_settings(monkeypatch):
    """No pacing delays; the robots flag is restored after every test."""
    monkeypatch.setattr("stayscout.config.settings.request_delay_min", 0.0)
    monkeypatch.setattr("stayscout.config.settings.request_delay_jitter", 0.0)
    monkeypatch.setattr("stayscout.config.settings.ignore_robots_txt", False)
    monkeypatch.setattr("stayscout.config.settings.base_url", "https://www.airbnb.ca")


def test_search_prints_payload():
    ok = ToolResult(payload={"searchUrl": "https://www.airbnb.ca/s/Paris/homes", "searchResults": []})

    with patch("cli.main.AirbnbSession") as session_cls, \
         patch("cli.main.search_listings", return_value=ok) as mock_search:
        result = runner.invoke(app, ["search", "--location", "Paris", "--adults", "2", "--min-price", "80"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == ok.payload
    session_cls.return_value.initialize.assert_called_once()

    params = mock_search.call_args.args[1]
    assert params.location == "Paris"
    assert params.adults == 2
    assert params.min_price == 80


def test_search_requires_location_or_place_id():
    with patch("cli.main.AirbnbSession") as session_cls:
        result = runner.invoke(app, ["search", "--adults", "2"])

    assert result.exit_code == 2
    session_cls.assert_not_called()


def test_search_error_exits_nonzero():
    denied = ToolResult.failure(results.POLICY, "blocked", searchUrl="u")

    with patch("cli.main.AirbnbSession"), patch("cli.main.search_listings", return_value=denied):
        result = runner.invoke(app, ["search", "--place-id", "abc"])

    assert result.exit_code == 1
    assert '"error": "blocked"' in result.output


def test_ignore_robots_flag_sets_process_option():
    ok = ToolResult(payload={"searchResults": []})

    with patch("cli.main.AirbnbSession"), patch("cli.main.search_listings", return_value=ok):
        result = runner.invoke(app, ["--ignore-robots-txt", "search", "--location", "Paris"])

    assert result.exit_code == 0, result.output
    assert settings.ignore_robots_txt is True


def test_listing_prints_payload():
    ok = ToolResult(payload={"listingUrl": "https://www.airbnb.ca/rooms/48516", "details": []})

    with patch("cli.main.AirbnbSession"), \
         patch("cli.main.get_listing_details", return_value=ok) as mock_details:
        result = runner.invoke(app, ["listing", "48516", "--checkin", "2025-07-01"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == ok.payload

    params = mock_details.call_args.args[1]
    assert params.id == "48516"
    assert params.checkin == "2025-07-01"


def test_listing_rejects_blank_id():
    with patch("cli.main.AirbnbSession") as session_cls, \
         patch("cli.main.get_listing_details") as mock_details:
        result = runner.invoke(app, ["listing", "   "])

    assert result.exit_code == 2
    assert "Traceback" not in result.output
    session_cls.assert_not_called()
    mock_details.assert_not_called()


@respx.mock
def test_robots_allowed():
    respx.get("https://www.airbnb.ca/robots.txt").mock(
        return_value=httpx.Response(
            200,
            text=(
                "User-agent: *\nDisallow: /account\nCrawl-delay: 2\n"
                "Sitemap: https://www.airbnb.ca/sitemap.xml\n"
            ),
        )
    )

    result = runner.invoke(app, ["robots", "/s/Paris/homes"])

    assert result.exit_code == 0, result.output
    assert "Allowed    : yes" in result.output
    assert "Crawl-delay: 2s" in result.output
    assert "Sitemap    : https://www.airbnb.ca/sitemap.xml" in result.output


@respx.mock
def test_robots_denied():
    respx.get("https://www.airbnb.ca/robots.txt").mock(
        return_value=httpx.Response(200, text="User-agent: *\nDisallow: /s/\n")
    )

    result = runner.invoke(app, ["robots", "/s/Paris/homes"])

    assert result.exit_code == 1
    assert "Allowed    : no" in result.output
