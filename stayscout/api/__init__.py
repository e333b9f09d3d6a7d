"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from stayscout.api import app

    uvicorn stayscout.api:app
"""

from stayscout.api.app import app, create_app

__all__ = ["app", "create_app"]
