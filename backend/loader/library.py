"""
Singleton loader for the external layout/rendering library.

State machine: unloaded -> loading -> loaded, back to unloaded on failure so a
later call retries from scratch. Concurrent callers share one in-flight future;
once loaded, load() returns an already-resolved future without any I/O.
All transitions happen on the event loop thread.
"""

import asyncio
import re
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional, Sequence

from loguru import logger

from shared.config import LIBRARY_CDN_URL, LIBRARY_NAME, LIBRARY_RESOURCE_URL
from shared.errors import LoadFailed

from .sources import fetch_library_source, read_static_resource

_VERSION_RE = re.compile(r"v(\d+\.\d+\.\d+)")

LoadScript = Callable[[Any], Awaitable[str]]
FetchSource = Callable[[str], Awaitable[Optional[str]]]


@dataclass(frozen=True)
class LibraryHandle:
    """Loaded library. Consumers treat source as opaque script text."""
    name: str
    source: str
    origin: str
    version: Optional[str] = None


def evaluate_source(source: Optional[str], origin: str, name: str = LIBRARY_NAME) -> Optional[LibraryHandle]:
    """Accept source text only if it actually defines the library; None otherwise."""
    if not source or not source.strip():
        return None
    if not re.search(rf"\b{re.escape(name)}\b", source):
        return None
    match = _VERSION_RE.search(source[:512])
    return LibraryHandle(name=name, source=source, origin=origin, version=match.group(1) if match else None)


class _Attempt:
    """One in-flight load: the private task and the future handed to callers."""

    def __init__(self, future: asyncio.Future):
        self.future = future
        self.task: Optional[asyncio.Task] = None


class LibraryLoader:
    def __init__(
        self,
        load_script: Optional[LoadScript] = None,
        fetch_source: Optional[FetchSource] = None,
        sources: Optional[Sequence[str]] = None,
        name: str = LIBRARY_NAME,
    ):
        self.name = name
        self._load_script = load_script or read_static_resource
        self._fetch_source = fetch_source or fetch_library_source
        if sources is None:
            sources = [url for url in (LIBRARY_RESOURCE_URL, LIBRARY_CDN_URL) if url]
        self._sources: List[str] = list(sources)
        self._instance: Optional[LibraryHandle] = None
        self._attempt: Optional[_Attempt] = None

    @property
    def state(self) -> str:
        if self._instance is not None:
            return "loaded"
        if self._attempt is not None:
            return "loading"
        return "unloaded"

    def peek(self) -> Optional[LibraryHandle]:
        """Cached handle or None. Never triggers a load."""
        return self._instance

    def load(self, context: Any = None) -> "asyncio.Future[LibraryHandle]":
        """
        Load or await the library. Must be called from a running event loop.
        Callers arriving while a load is in flight get the same future object.
        Cancelling that future only detaches its waiters; the load keeps running.
        """
        loop = asyncio.get_running_loop()
        if self._instance is not None:
            logger.debug("{} already loaded, returning cached handle", self.name)
            done = loop.create_future()
            done.set_result(self._instance)
            return done
        attempt = self._attempt
        if attempt is None:
            attempt = self._attempt = _Attempt(loop.create_future())
            attempt.task = loop.create_task(self._run(attempt, context))
        elif attempt.future.cancelled():
            attempt.future = loop.create_future()
        return attempt.future

    def reset(self) -> None:
        """Forget the cached handle and any in-flight load. Teardown/test hook."""
        self._instance = None
        self._attempt = None

    async def _run(self, attempt: _Attempt, context: Any) -> None:
        try:
            handle = await self._load(context)
        except asyncio.CancelledError:
            self._finish(attempt)
            if not attempt.future.done():
                attempt.future.cancel()
            raise
        except Exception as e:
            self._finish(attempt)
            if not attempt.future.done():
                attempt.future.set_exception(e)
            return

        # A reset() during the load leaves the result with its own waiters only
        if self._attempt is attempt:
            self._instance = handle
        self._finish(attempt)
        if not attempt.future.done():
            attempt.future.set_result(handle)

    def _finish(self, attempt: _Attempt) -> None:
        if self._attempt is attempt:
            self._attempt = None

    async def _load(self, context: Any) -> LibraryHandle:
        attempts: List[str] = []
        handle = await self._load_primary(context, attempts)
        if handle is None:
            handle = await self._load_via_fetch(attempts)
        logger.info("Loaded {} {} from {}", self.name, handle.version or "", handle.origin)
        return handle

    async def _load_primary(self, context: Any, attempts: List[str]) -> Optional[LibraryHandle]:
        try:
            source = await self._load_script(context)
        except Exception as e:
            attempts.append(f"static: {type(e).__name__}")
            logger.warning("Primary load of {} failed: {}", self.name, e)
            return None
        handle = evaluate_source(source, "static", self.name)
        if handle is None:
            attempts.append(f"static: source does not define {self.name}")
            logger.warning("Primary source for {} does not define the library", self.name)
        return handle

    async def _load_via_fetch(self, attempts: List[str]) -> LibraryHandle:
        for url in self._sources:
            try:
                source = await self._fetch_source(url)
            except Exception as e:
                attempts.append(f"{url}: {type(e).__name__}")
                logger.warning("Fetch of {} from {} failed: {}", self.name, url, e)
                continue
            handle = evaluate_source(source, url, self.name)
            if handle is not None:
                return handle
            attempts.append(f"{url}: empty or invalid source")
            logger.warning("Fetch of {} from {} returned no usable source", self.name, url)

        primary = attempts[0] if attempts else "unknown error"
        raise LoadFailed(
            f"Failed to load {self.name}: {primary} (fallback also failed: all fetch sources exhausted)",
            attempts=attempts,
        )
