"""Unit tests for the SSE fan-out hub."""

import asyncio
import json

import pytest

from hostpanel.application.services import SSEManager
from hostpanel.application.services.sse_manager import KEEPALIVE, format_event


def test_format_event():
    frame = format_event("job_update", {"id": "j1", "progress": 40})
    assert frame.startswith("event: job_update\ndata: ")
    assert frame.endswith("\n\n")
    assert json.loads(frame.split("data: ", 1)[1]) == {"id": "j1", "progress": 40}


async def _next(stream):
    return await asyncio.wait_for(stream.__anext__(), timeout=1)


@pytest.mark.asyncio
async def test_broadcast_reaches_subscriber():
    sse = SSEManager()
    stream = sse.subscribe()
    pending = asyncio.ensure_future(_next(stream))
    while sse.client_count == 0:
        await asyncio.sleep(0)

    await sse.broadcast("metrics", {"cpu": 12.5})

    assert (await pending).startswith("event: metrics\n")
    await stream.aclose()
    assert sse.client_count == 0


@pytest.mark.asyncio
async def test_subscription_filters_event_types():
    sse = SSEManager()
    stream = sse.subscribe({"job_update"})
    pending = asyncio.ensure_future(_next(stream))
    while sse.client_count == 0:
        await asyncio.sleep(0)

    await sse.broadcast("metrics", {"cpu": 1})
    await sse.broadcast("job_update", {"id": "j1"})

    assert (await pending).startswith("event: job_update\n")
    await stream.aclose()


@pytest.mark.asyncio
async def test_keepalive_on_quiet_stream():
    sse = SSEManager(keepalive_interval=0.01)
    stream = sse.subscribe()

    assert await _next(stream) == KEEPALIVE
    await stream.aclose()


async def _collect(stream):
    return [frame async for frame in stream]


@pytest.mark.asyncio
async def test_slow_client_is_dropped():
    sse = SSEManager(queue_size=1)
    task = asyncio.ensure_future(_collect(sse.subscribe()))
    while sse.client_count == 0:
        await asyncio.sleep(0)

    # second frame overflows the queue before the client reads the first
    await sse.broadcast("a", {})
    await sse.broadcast("b", {})

    assert sse.client_count == 0
    assert await asyncio.wait_for(task, timeout=1) == []


@pytest.mark.asyncio
async def test_shutdown_ends_streams():
    sse = SSEManager()
    tasks = [asyncio.ensure_future(_collect(sse.subscribe())) for _ in range(2)]
    while sse.client_count < 2:
        await asyncio.sleep(0)

    await sse.shutdown()

    assert await asyncio.wait_for(asyncio.gather(*tasks), timeout=1) == [[], []]
    assert sse.client_count == 0
