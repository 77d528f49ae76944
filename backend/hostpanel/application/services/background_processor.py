"""Background Processor: asyncio daemon for processing queued panel jobs."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from hostpanel.application.services.sse_manager import SSEManager
from hostpanel.domain.entities.panel_job import JobType, PanelJob

logger = logging.getLogger(__name__)

# Polling interval in seconds
POLL_INTERVAL = 2
BATCH_SIZE = 5

ProgressCallback = Callable[[int | float, str | None], Awaitable[None]]
JobHandler = Callable[[PanelJob, AsyncSession, ProgressCallback], Awaitable[dict[str, Any] | None]]


def job_event(job: PanelJob) -> dict[str, Any]:
    """Serialize a job for the ``job_update`` SSE event."""
    return {
        "id": job.id,
        "job_type": job.job_type.value,
        "target": job.target,
        "status": job.status.value,
        "progress": job.progress,
        "progress_message": job.progress_message,
        "result": job.result,
        "error_message": job.error_message,
        "started_at": job.started_at.isoformat() if job.started_at else None,
        "completed_at": job.completed_at.isoformat() if job.completed_at else None,
    }


class BackgroundProcessor:
    """Asyncio daemon that polls the panel_jobs table and executes queued work.

    Runs as an asyncio.Task inside FastAPI's lifespan. Each job gets its own
    database session with proper commit/rollback boundaries. Work is
    dispatched on ``job_type`` to the registered handler, and every state
    change is broadcast via the SSEManager so connected clients see
    real-time progress.
    """

    def __init__(
        self,
        sse_manager: SSEManager,
        handlers: dict[JobType, JobHandler],
        session_factory: async_sessionmaker,
        poll_interval: float = POLL_INTERVAL,
    ) -> None:
        self._sse = sse_manager
        self._handlers = handlers
        self._session_factory = session_factory
        self._poll_interval = poll_interval
        self._running = False
        self._task: asyncio.Task | None = None

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start the background processing loop."""
        self._running = True
        self._task = asyncio.create_task(self._loop())
        logger.info("BackgroundProcessor started (handlers: %s)", ", ".join(h.value for h in self._handlers))

    async def stop(self) -> None:
        """Gracefully stop the background processing loop."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("BackgroundProcessor stopped")

    async def _loop(self) -> None:
        """Main polling loop: picks up queued jobs and processes them."""
        while self._running:
            try:
                await self.poll_once()
            except asyncio.CancelledError:
                break
            except Exception:
                logger.exception("BackgroundProcessor polling error")

            await asyncio.sleep(self._poll_interval)

    async def poll_once(self) -> int:
        """Poll for queued jobs using a short-lived session, then process each.

        Returns the number of jobs picked up.
        """
        from hostpanel.infrastructure.database.repositories import SQLAlchemyPanelJobRepository

        async with self._session_factory() as session:
            repo = SQLAlchemyPanelJobRepository(session)
            jobs = await repo.get_queued(limit=BATCH_SIZE)
            await session.commit()

        for job in jobs:
            await self.process_job(job)
        return len(jobs)

    async def process_job(self, job: PanelJob) -> None:
        """Process a single job with its own database session."""
        from hostpanel.infrastructure.database.repositories import SQLAlchemyPanelJobRepository

        logger.info("Processing job %s (%s): %s", job.id, job.job_type.value, job.target)

        async with self._session_factory() as session:
            repo = SQLAlchemyPanelJobRepository(session)

            async def progress(pct: int | float, message: str | None = None) -> None:
                job.update_progress(pct, message)
                await repo.update(job)
                await session.commit()
                await self._broadcast_status(job)

            try:
                job.mark_processing(f"Processing: {job.target}")
                await repo.update(job)
                await session.commit()
                await self._broadcast_status(job)

                handler = self._handlers.get(job.job_type)
                if handler is None:
                    raise ValueError(f"Unknown job type: {job.job_type.value}")

                result = await handler(job, session, progress)

                job.mark_completed(result)
                await repo.update(job)
                await session.commit()
                await self._broadcast_status(job)
                logger.info("Job %s completed", job.id)

            except Exception as e:
                await session.rollback()
                logger.exception("Job %s failed: %s", job.id, e)

                # Mark failed in a fresh transaction
                job.mark_failed(str(e) or type(e).__name__)
                await repo.update(job)
                await session.commit()
                await self._broadcast_status(job)

    async def _broadcast_status(self, job: PanelJob) -> None:
        """Broadcast job status update to SSE clients."""
        await self._sse.broadcast("job_update", job_event(job))
