"""
API module - routes and schemas.
Routes are split by domain: data, charts, library.
"""

from .responses import ORJSONResponse, error_response
from .routes import register_routes

__all__ = ["ORJSONResponse", "error_response", "register_routes"]
