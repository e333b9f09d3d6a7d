"""FastAPI application factory.

Lifespan
--------
On startup the app warms a single :class:`AirbnbSession` (shared across all
requests via ``request.app.state.session``) and loads robots.txt.  A failed
warm-up is logged and the app still starts.

Routers
-------
    /search    search results
    /listings  listing details
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from stayscout import __version__
from stayscout.airbnb.session import AirbnbSession
from stayscout.api.routers import listings as listings_router
from stayscout.api.routers import search as search_router


def create_app(session: Optional[AirbnbSession] = None) -> FastAPI:
    """Return a fully-configured FastAPI application instance.

    Args:
        session: Session to serve requests with.  A new one is created and
            initialised on startup when omitted.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if session is None:
            app.state.session = AirbnbSession()
            app.state.session.initialize()
        else:
            app.state.session = session
        yield

    app = FastAPI(
        title="stayscout API",
        description="Airbnb search results and listing details as JSON.",
        version=__version__,
        lifespan=lifespan,
    )

    app.include_router(search_router.router, prefix="/search", tags=["search"])
    app.include_router(listings_router.router, prefix="/listings", tags=["listings"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn stayscout.api.app:app
app = create_app()
