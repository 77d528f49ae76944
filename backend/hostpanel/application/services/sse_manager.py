"""Server-sent events hub for job progress and live metrics."""

import asyncio
import json
import logging
from collections.abc import AsyncGenerator
from typing import Any

logger = logging.getLogger(__name__)

KEEPALIVE = ": keepalive\n\n"


def format_event(event_type: str, data: dict[str, Any]) -> str:
    return f"event: {event_type}\ndata: {json.dumps(data, default=str)}\n\n"


class SSEManager:
    """Fans events out to every connected stream.

    Each subscriber owns a bounded queue. A subscriber that stops draining
    its queue is dropped instead of stalling the broadcaster.
    """

    def __init__(self, queue_size: int = 256, keepalive_interval: float = 15.0) -> None:
        self._queue_size = queue_size
        self._keepalive_interval = keepalive_interval
        self._queues: list[asyncio.Queue[str | None]] = []

    @property
    def client_count(self) -> int:
        return len(self._queues)

    async def subscribe(self, event_types: set[str] | None = None) -> AsyncGenerator[str, None]:
        """Yield formatted SSE frames until shutdown or client disconnect.

        When ``event_types`` is given, other events are skipped. A comment
        frame is sent after each quiet ``keepalive_interval`` so proxies keep
        the connection open.
        """
        queue: asyncio.Queue[str | None] = asyncio.Queue(maxsize=self._queue_size)
        self._queues.append(queue)
        logger.debug("SSE client connected (%d total)", len(self._queues))
        try:
            while True:
                try:
                    frame = await asyncio.wait_for(queue.get(), timeout=self._keepalive_interval)
                except asyncio.TimeoutError:
                    yield KEEPALIVE
                    continue
                if frame is None:
                    break
                if event_types and frame.split("\n", 1)[0].removeprefix("event: ") not in event_types:
                    continue
                yield frame
        finally:
            if queue in self._queues:
                self._queues.remove(queue)
            logger.debug("SSE client disconnected (%d left)", len(self._queues))

    async def broadcast(self, event_type: str, data: dict[str, Any]) -> None:
        frame = format_event(event_type, data)
        for queue in list(self._queues):
            try:
                queue.put_nowait(frame)
            except asyncio.QueueFull:
                logger.warning("SSE client queue full, dropping client")
                self._queues.remove(queue)
                self._drain_and_close(queue)

    async def shutdown(self) -> None:
        queues, self._queues = self._queues, []
        for queue in queues:
            self._drain_and_close(queue)

    @staticmethod
    def _drain_and_close(queue: "asyncio.Queue[str | None]") -> None:
        while not queue.empty():
            queue.get_nowait()
        queue.put_nowait(None)
