"""stayscout CLI: entry-point for all operations.

Usage:
    python cli/main.py --help

Commands:
    search    → run the search pipeline and print its JSON result
    listing   → run the listing-details pipeline and print its JSON result
    robots    → report whether robots.txt allows a path for this session
    serve     → run the MCP stdio server
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from stayscout.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from typing import Optional

import typer
from pydantic import ValidationError

from stayscout.airbnb.listing import get_listing_details
from stayscout.airbnb.params import ListingParams, SearchParams
from stayscout.airbnb.results import ToolResult
from stayscout.airbnb.search import search_listings
from stayscout.airbnb.session import AirbnbSession
from stayscout.config import settings

app = typer.Typer(
    name="stayscout",
    help="Airbnb search results and listing details as JSON.",
    no_args_is_help=True,
)


@app.callback()
def main(
    ignore_robots_txt: bool = typer.Option(
        False,
        "--ignore-robots-txt",
        help="Do not fetch or honour robots.txt for this process.",
    ),
) -> None:
    if ignore_robots_txt:
        settings.ignore_robots_txt = True


def _emit(result: ToolResult) -> None:
    typer.echo(result.to_text())
    if result.is_error:
        raise typer.Exit(1)


# ---------------------------------------------------------------------------
# Pipelines
# ---------------------------------------------------------------------------
@app.command("search")
def search(
    location: Optional[str] = typer.Option(None, help="City, region or address to search."),
    place_id: Optional[str] = typer.Option(None, "--place-id", help="Google Maps Place ID."),
    checkin: Optional[str] = typer.Option(None, help="Check-in date (YYYY-MM-DD)."),
    checkout: Optional[str] = typer.Option(None, help="Check-out date (YYYY-MM-DD)."),
    adults: int = typer.Option(1, help="Number of adults."),
    children: int = typer.Option(0, help="Number of children."),
    infants: int = typer.Option(0, help="Number of infants."),
    pets: int = typer.Option(0, help="Number of pets."),
    min_price: Optional[float] = typer.Option(None, "--min-price", help="Minimum price."),
    max_price: Optional[float] = typer.Option(None, "--max-price", help="Maximum price."),
    cursor: Optional[str] = typer.Option(None, help="Pagination cursor from a previous search."),
) -> None:
    """Search listings and print the projected results."""
    if not (location or place_id):
        typer.echo("[search] One of --location or --place-id is required.", err=True)
        raise typer.Exit(2)

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
    )
    session = AirbnbSession()
    session.initialize()
    _emit(search_listings(session, params))


@app.command("listing")
def listing(
    listing_id: str = typer.Argument(..., help="Airbnb listing id."),
    checkin: Optional[str] = typer.Option(None, help="Check-in date (YYYY-MM-DD)."),
    checkout: Optional[str] = typer.Option(None, help="Check-out date (YYYY-MM-DD)."),
    adults: int = typer.Option(1, help="Number of adults."),
    children: int = typer.Option(0, help="Number of children."),
    infants: int = typer.Option(0, help="Number of infants."),
    pets: int = typer.Option(0, help="Number of pets."),
) -> None:
    """Fetch one listing and print its projected sections."""
    try:
        params = ListingParams(
            id=listing_id,
            checkin=checkin,
            checkout=checkout,
            adults=adults,
            children=children,
            infants=infants,
            pets=pets,
        )
    except ValidationError as exc:
        for error in exc.errors(include_url=False):
            typer.echo(f"[listing] {error['msg']}", err=True)
        raise typer.Exit(2)

    session = AirbnbSession()
    session.initialize()
    _emit(get_listing_details(session, params))


# ---------------------------------------------------------------------------
# Policy
# ---------------------------------------------------------------------------
@app.command("robots")
def robots(
    path: str = typer.Argument(..., help="Path to check, e.g. /s/Paris/homes"),
) -> None:
    """Report whether robots.txt allows this session's user agent to fetch *path*."""
    session = AirbnbSession()
    session.robots.load(session.client, session.robots_url)

    allowed = session.is_path_allowed(path)
    typer.echo(f"[robots] User-agent : {session.client.user_agent}")
    typer.echo(f"[robots] Path       : {path}")
    typer.echo(f"[robots] Allowed    : {'yes' if allowed else 'no'}")
    delay = session.robots.crawl_delay()
    if delay is not None:
        typer.echo(f"[robots] Crawl-delay: {delay:g}s")
    for sitemap in session.robots.ruleset.sitemaps:
        typer.echo(f"[robots] Sitemap    : {sitemap}")
    if not allowed:
        raise typer.Exit(1)


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------
@app.command("serve")
def serve() -> None:
    """Run the MCP server on stdio."""
    from stayscout.mcp_server import run_server

    run_server(ignore_robots_txt=settings.ignore_robots_txt)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
