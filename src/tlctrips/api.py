"""
FastAPI application exposing the trip queries.

Endpoints:

    GET /health
    GET /trips?from_ms=<int>&n_results=<int>

Errors are returned as `{"error": "<message>"}` without stack traces.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .errors import TripsError
from .source import TripSource

log = logging.getLogger("api")


def create_app(source: TripSource) -> FastAPI:
    """Create the application answering queries using the given source."""
    app = FastAPI(title="tlctrips", description="Query NYC TLC taxi trips by time")
    app.state.source = source

    app.add_exception_handler(TripsError, _trips_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _generic_error_handler)

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    # sync: queries run on the worker thread pool, off the event loop
    @app.get("/trips")
    def trips(from_ms: int, n_results: int):
        log.info("received /trips from_ms=%d n_results=%d", from_ms, n_results)
        result = app.state.source.get_trips(from_ms, n_results)
        return {"trips": [trip.to_dict() for trip in result]}

    return app


async def _trips_error_handler(request: Request, exc: TripsError) -> JSONResponse:
    log.warning("%s %s... failure: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": str(exc)})


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return JSONResponse(status_code=400, content={"error": f"invalid request: {details}"})


async def _generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # the server logs the traceback when the exception is re-raised
    log.error("%s %s... failure: %r", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": "internal server error"})
