"""orjson-backed JSON responses and the error-to-status mapping shared by all routes."""

from typing import Any

import orjson
from fastapi.responses import JSONResponse
from loguru import logger

from shared.errors import LoadFailed, VizError


class ORJSONResponse(JSONResponse):
    def render(self, content: Any) -> bytes:
        return orjson.dumps(content, option=orjson.OPT_NON_STR_KEYS)


def error_response(exc: VizError) -> ORJSONResponse:
    """400 for bad input or empty output, 503 when the library could not be loaded."""
    status_code = 503 if isinstance(exc, LoadFailed) else 400
    logger.warning("{} -> {}: {}", exc.__class__.__name__, status_code, exc.message)
    content = {"error": exc.message, "errorType": exc.__class__.__name__}
    missing = getattr(exc, "missing_fields", None)
    if missing:
        content["missingFields"] = missing
    attempts = getattr(exc, "attempts", None)
    if attempts:
        content["attempts"] = attempts
    return ORJSONResponse(status_code=status_code, content=content)
