"""API route modules."""

from fastapi import FastAPI

from . import charts, data, library


def register_routes(app: FastAPI):
    """Register all API routers."""
    app.include_router(data.router, prefix="/api/data", tags=["data"])
    app.include_router(charts.router, prefix="/api/charts", tags=["charts"])
    app.include_router(library.router, prefix="/api/library", tags=["library"])
