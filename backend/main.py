"""
Vizcore Backend - FastAPI entry point.
Serves chart data pipelines and the shared rendering library status.
"""

import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from api import ORJSONResponse, register_routes
from loader import load_library
from shared.config import LOG_LEVEL, PRELOAD_LIBRARY
from shared.errors import LoadFailed

logger.remove()
logger.add(sys.stderr, level=LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if PRELOAD_LIBRARY:
        try:
            await load_library()
        except LoadFailed as e:
            # Charts report the failure on their own load; the server still starts
            logger.warning("Library preload failed: {}", e.message)
    yield


app = FastAPI(title="Vizcore Backend", default_response_class=ORJSONResponse, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on {}", request.url.path)
    return ORJSONResponse(status_code=500, content={"error": str(exc) or "Internal server error"})


register_routes(app)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=3001)
