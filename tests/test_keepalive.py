import asyncio

import httpx
import pytest

from msgrelay.keepalive import ping_loop, ping_once


@pytest.mark.asyncio
async def test_ping_once_hits_health():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, text="Message server running")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        assert await ping_once(client, "https://relay.example.com") == 200
    assert seen == ["https://relay.example.com/health"]


@pytest.mark.asyncio
async def test_ping_once_logs_and_swallows_transport_errors():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        assert await ping_once(client, "https://relay.example.com") is None


@pytest.mark.asyncio
async def test_ping_loop_keeps_going_after_failures():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if len(calls) == 1:
            raise httpx.ConnectError("unreachable", request=request)
        return httpx.Response(200)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        task = asyncio.create_task(ping_loop("http://relay", 0.01, client))
        await asyncio.sleep(0.1)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
    assert len(calls) >= 2
