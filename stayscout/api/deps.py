"""Helpers shared by the API routers."""

from __future__ import annotations

from fastapi import Request
from fastapi.responses import JSONResponse

from stayscout.airbnb import results
from stayscout.airbnb.results import ToolResult
from stayscout.airbnb.session import AirbnbSession

_ERROR_STATUS = {
    results.POLICY: 403,
    results.INVALID_PARAMS: 422,
    results.EXTRACTION: 502,
    results.TRANSPORT: 502,
    results.REDIRECT: 502,
}


def get_session(request: Request) -> AirbnbSession:
    """The process-wide session opened by the app lifespan."""
    return request.app.state.session


def to_response(result: ToolResult) -> JSONResponse:
    """Render *result*'s payload, mapping its error kind to an HTTP status."""
    status = _ERROR_STATUS.get(result.error_kind or "", 500) if result.is_error else 200
    return JSONResponse(result.payload, status_code=status)
