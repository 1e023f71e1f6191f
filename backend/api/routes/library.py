"""Library API - status, load and reset of the shared rendering library."""

from fastapi import APIRouter

import loader
from shared.errors import LoadFailed

from ..responses import error_response

router = APIRouter()


def _status():
    handle = loader.get_library()
    return {
        "state": loader.library_loader.state,
        "origin": handle.origin if handle else None,
        "version": handle.version if handle else None,
    }


@router.get("/status")
async def library_status():
    return _status()


@router.post("/load")
async def load_library_route():
    """Load from the configured sources only; clients never choose the file."""
    try:
        await loader.load_library()
    except LoadFailed as e:
        return error_response(e)
    return _status()


@router.post("/reset")
async def reset_library_route():
    loader.reset_library()
    return {"success": True}
