"""
Source primitives for the rendering library.
Primary: the bundled static file. Fallback: HTTP fetch with retry on transport errors.
"""

from pathlib import Path
from typing import Any, Optional

import aiofiles
import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from shared.config import FETCH_ATTEMPTS, FETCH_TIMEOUT, LIBRARY_PATH


async def read_static_resource(context: Any = None) -> str:
    """Read the bundled library file. context may be a str/Path overriding the default location."""
    path = Path(context) if isinstance(context, (str, Path)) else LIBRARY_PATH
    async with aiofiles.open(path, "r", encoding="utf-8") as f:
        return await f.read()


@retry(
    stop=stop_after_attempt(FETCH_ATTEMPTS),
    wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
    retry=retry_if_exception_type(httpx.TransportError),
    reraise=True,
)
async def _get(client: httpx.AsyncClient, url: str) -> httpx.Response:
    return await client.get(url)


async def fetch_library_source(url: str) -> Optional[str]:
    """Fetch library source text. Returns None on a non-success status."""
    async with httpx.AsyncClient(timeout=FETCH_TIMEOUT, follow_redirects=True) as client:
        resp = await _get(client, url)
    if not resp.is_success:
        return None
    return resp.text
