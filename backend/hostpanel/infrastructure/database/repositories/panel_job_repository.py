"""SQLAlchemy implementation of the PanelJobRepository."""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hostpanel.application.interfaces.panel_job_repository import PanelJobRepository
from hostpanel.domain.entities.panel_job import JobStatus, JobType, PanelJob
from hostpanel.infrastructure.database.models.panel_job_models import PanelJobModel


class SQLAlchemyPanelJobRepository(PanelJobRepository):
    """Concrete panel job repository backed by SQLAlchemy."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, job_id: str) -> PanelJob | None:
        result = await self._session.execute(
            select(PanelJobModel).where(PanelJobModel.id == job_id)
        )
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def get_all(
        self,
        *,
        job_type: JobType | None = None,
        status: JobStatus | None = None,
        limit: int = 200,
    ) -> list[PanelJob]:
        stmt = select(PanelJobModel)
        if job_type is not None:
            stmt = stmt.where(PanelJobModel.job_type == job_type.value)
        if status is not None:
            stmt = stmt.where(PanelJobModel.status == status.value)
        result = await self._session.execute(
            stmt.order_by(PanelJobModel.created_at.desc()).limit(limit)
        )
        return [self._to_domain(m) for m in result.scalars().all()]

    async def get_queued(self, limit: int = 10) -> list[PanelJob]:
        result = await self._session.execute(
            select(PanelJobModel)
            .where(PanelJobModel.status == JobStatus.QUEUED.value)
            .order_by(PanelJobModel.created_at.asc())
            .limit(limit)
        )
        return [self._to_domain(m) for m in result.scalars().all()]

    async def create(self, job: PanelJob) -> PanelJob:
        if not job.id:
            job.id = str(uuid.uuid4())

        model = PanelJobModel(
            id=job.id,
            job_type=job.job_type.value,
            target=job.target,
            payload=job.payload,
            status=job.status.value,
            progress=job.progress,
            progress_message=job.progress_message,
            result=job.result,
            error_message=job.error_message,
            created_at=job.created_at,
            started_at=job.started_at,
            completed_at=job.completed_at,
        )
        self._session.add(model)
        await self._session.flush()
        return job

    async def update(self, job: PanelJob) -> PanelJob:
        result = await self._session.execute(
            select(PanelJobModel).where(PanelJobModel.id == job.id)
        )
        model = result.scalar_one_or_none()
        if model is None:
            raise ValueError(f"PanelJob with id {job.id} not found")

        model.status = job.status.value
        model.payload = job.payload
        model.progress = job.progress
        model.progress_message = job.progress_message
        model.result = job.result
        model.error_message = job.error_message
        model.started_at = job.started_at
        model.completed_at = job.completed_at
        await self._session.flush()
        return job

    # ── Mapping ──────────────────────────────────────────────────────

    @staticmethod
    def _to_domain(model: PanelJobModel) -> PanelJob:
        return PanelJob(
            id=model.id,
            job_type=JobType(model.job_type),
            target=model.target,
            payload=dict(model.payload or {}),
            status=JobStatus(model.status),
            progress=model.progress,
            progress_message=model.progress_message,
            result=model.result,
            error_message=model.error_message,
            created_at=model.created_at,
            started_at=model.started_at,
            completed_at=model.completed_at,
        )
