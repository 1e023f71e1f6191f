"""Tests for the singleton library loader: coalescing, fallback chain and retry after failure."""

import asyncio

import httpx
import pytest

import loader
from loader import LibraryLoader, evaluate_source
from loader.sources import _get
from shared.errors import LoadFailed

D3_SOURCE = "// https://d3js.org v7.9.0 Copyright 2010-2023 Mike Bostock\n(function(t,n){n(t.d3=t.d3||{})})(this,function(t){});"

PRIMARY_URL = "https://static.example.test/d3.min.js"
CDN_URL = "https://cdn.example.test/d3.min.js"


class FakePrimitives:
    """Script loader and fetcher doubles that record every call."""

    def __init__(self, script=D3_SOURCE, fetched=None, script_error=None):
        self.script = script
        self.fetched = dict(fetched or {})
        self.script_error = script_error
        self.script_calls = []
        self.fetch_calls = []
        self.gate = None

    async def load_script(self, context):
        self.script_calls.append(context)
        if self.gate is not None:
            await self.gate.wait()
        if self.script_error is not None:
            raise self.script_error
        return self.script

    async def fetch_source(self, url):
        self.fetch_calls.append(url)
        result = self.fetched.get(url)
        if isinstance(result, Exception):
            raise result
        return result

    def loader(self, sources=(PRIMARY_URL, CDN_URL)):
        return LibraryLoader(load_script=self.load_script, fetch_source=self.fetch_source, sources=list(sources))


class TestEvaluateSource:
    def test_accepts_library_source(self):
        handle = evaluate_source(D3_SOURCE, "static")
        assert handle.name == "d3"
        assert handle.version == "7.9.0"
        assert handle.origin == "static"

    def test_rejects_empty_or_foreign_source(self):
        assert evaluate_source(None, "static") is None
        assert evaluate_source("   ", "static") is None
        assert evaluate_source("window.chartjs = {}", "static") is None


class TestCoalescing:
    @pytest.mark.asyncio
    async def test_concurrent_loads_share_one_future(self):
        fakes = FakePrimitives()
        fakes.gate = asyncio.Event()
        ld = fakes.loader()

        first = ld.load()
        second = ld.load()
        assert first is second
        assert ld.state == "loading"

        fakes.gate.set()
        a, b = await asyncio.gather(first, second)
        assert a is b
        assert len(fakes.script_calls) == 1
        assert ld.state == "loaded"
        assert ld.peek() is a

    @pytest.mark.asyncio
    async def test_timed_out_waiter_does_not_strand_load(self):
        fakes = FakePrimitives()
        fakes.gate = asyncio.Event()
        ld = fakes.loader()

        first = ld.load()
        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(first, 0.01)
        assert first.cancelled()
        assert ld.state == "loading"

        second = ld.load()
        assert second is not first
        fakes.gate.set()
        handle = await second
        assert handle.name == "d3"
        assert ld.state == "loaded"
        assert ld.peek() is handle
        assert len(fakes.script_calls) == 1

    @pytest.mark.asyncio
    async def test_load_completes_after_every_waiter_gave_up(self):
        fakes = FakePrimitives()
        fakes.gate = asyncio.Event()
        ld = fakes.loader()

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(ld.load(), 0.01)
        fakes.gate.set()
        for _ in range(5):
            await asyncio.sleep(0)
        assert ld.state == "loaded"
        assert (await ld.load()).origin == "static"
        assert len(fakes.script_calls) == 1

    @pytest.mark.asyncio
    async def test_loaded_returns_resolved_future_without_io(self):
        fakes = FakePrimitives()
        ld = fakes.loader()
        handle = await ld.load()

        again = ld.load()
        assert again.done()
        assert again.result() is handle
        assert len(fakes.script_calls) == 1

    @pytest.mark.asyncio
    async def test_peek_never_loads(self):
        fakes = FakePrimitives()
        ld = fakes.loader()
        assert ld.peek() is None
        assert ld.state == "unloaded"
        assert fakes.script_calls == []


class TestFallback:
    @pytest.mark.asyncio
    async def test_fetch_used_when_primary_fails(self):
        fakes = FakePrimitives(
            script_error=FileNotFoundError("d3.min.js"),
            fetched={PRIMARY_URL: None, CDN_URL: D3_SOURCE},
        )
        handle = await fakes.loader().load()
        assert handle.origin == CDN_URL
        assert fakes.fetch_calls == [PRIMARY_URL, CDN_URL]

    @pytest.mark.asyncio
    async def test_primary_without_library_falls_back(self):
        fakes = FakePrimitives(script="console.log('nothing here')", fetched={PRIMARY_URL: D3_SOURCE})
        handle = await fakes.loader().load()
        assert handle.origin == PRIMARY_URL
        assert fakes.fetch_calls == [PRIMARY_URL]

    @pytest.mark.asyncio
    async def test_fetch_errors_are_swallowed_until_exhausted(self):
        fakes = FakePrimitives(
            script_error=RuntimeError("script blocked"),
            fetched={PRIMARY_URL: httpx.ConnectError("refused"), CDN_URL: D3_SOURCE},
        )
        handle = await fakes.loader().load()
        assert handle.origin == CDN_URL

    @pytest.mark.asyncio
    async def test_all_sources_fail(self):
        fakes = FakePrimitives(script_error=RuntimeError("script blocked"))
        ld = fakes.loader()
        with pytest.raises(LoadFailed) as exc_info:
            await ld.load()
        err = exc_info.value
        assert err.message.startswith("Failed to load d3: static: RuntimeError")
        assert "fallback also failed" in err.message
        assert len(err.attempts) == 3
        assert ld.state == "unloaded"
        assert ld.peek() is None

    @pytest.mark.asyncio
    async def test_retry_after_failure_starts_fresh(self):
        fakes = FakePrimitives(script_error=RuntimeError("offline"))
        ld = fakes.loader(sources=[])
        with pytest.raises(LoadFailed):
            await ld.load()

        fakes.script_error = None
        handle = await ld.load()
        assert handle.origin == "static"
        assert len(fakes.script_calls) == 2


class TestReset:
    @pytest.mark.asyncio
    async def test_reset_clears_instance(self):
        fakes = FakePrimitives()
        ld = fakes.loader()
        await ld.load()
        ld.reset()
        assert ld.peek() is None
        assert ld.state == "unloaded"
        await ld.load()
        assert len(fakes.script_calls) == 2

    @pytest.mark.asyncio
    async def test_reset_during_load_discards_result(self):
        fakes = FakePrimitives()
        fakes.gate = asyncio.Event()
        ld = fakes.loader()
        pending = ld.load()
        ld.reset()
        fakes.gate.set()
        handle = await pending
        assert handle.name == "d3"
        assert ld.peek() is None


class TestModuleSingleton:
    @pytest.mark.asyncio
    async def test_loads_bundled_file(self, tmp_path):
        path = tmp_path / "d3.min.js"
        path.write_text(D3_SOURCE, encoding="utf-8")

        handle = await loader.load_library(str(path))
        assert handle.origin == "static"
        assert loader.get_library() is handle
        loader.reset_library()
        assert loader.get_library() is None


class TestHttpRetry:
    @pytest.mark.asyncio
    async def test_transport_error_retried(self):
        calls = []

        def handler(request):
            calls.append(request.url)
            if len(calls) == 1:
                raise httpx.ConnectError("refused", request=request)
            return httpx.Response(200, text=D3_SOURCE)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            resp = await _get(client, CDN_URL)
        assert resp.status_code == 200
        assert len(calls) == 2
