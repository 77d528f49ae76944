"""Panel job endpoints: queue inspection, restart and the SSE stream."""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from hostpanel.application.schemas.jobs import PanelJobResponse
from hostpanel.application.services import PanelJobService, SSEManager
from hostpanel.domain.entities import JobStatus, JobType
from hostpanel.infrastructure.dependencies import get_job_service, get_sse_manager
from hostpanel.presentation.api.v1.errors import PANEL_ERRORS, to_http

router = APIRouter(prefix="/jobs", tags=["Jobs"])

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


@router.get("", response_model=list[PanelJobResponse])
async def list_jobs(
    job_type: JobType | None = Query(None),
    status: JobStatus | None = Query(None),
    limit: int = Query(200, ge=1, le=1000),
    service: PanelJobService = Depends(get_job_service),
) -> list[PanelJobResponse]:
    jobs = await service.list_jobs(job_type=job_type, status=status, limit=limit)
    return [PanelJobResponse.model_validate(j) for j in jobs]


@router.get("/stream")
async def job_status_stream(
    sse: SSEManager = Depends(get_sse_manager),
) -> StreamingResponse:
    """SSE endpoint for real-time job status updates.

    Clients connect via EventSource and receive 'job_update' events
    as background jobs progress through their lifecycle.
    """
    return StreamingResponse(
        sse.subscribe({"job_update"}),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


@router.get("/{job_id}", response_model=PanelJobResponse)
async def get_job(
    job_id: str,
    service: PanelJobService = Depends(get_job_service),
) -> PanelJobResponse:
    try:
        job = await service.get_job(job_id)
    except PANEL_ERRORS as e:
        raise to_http(e)
    return PanelJobResponse.model_validate(job)


@router.post("/{job_id}/restart", response_model=PanelJobResponse)
async def restart_job(
    job_id: str,
    service: PanelJobService = Depends(get_job_service),
) -> PanelJobResponse:
    """Re-queue a completed or failed job."""
    try:
        job = await service.restart_job(job_id)
    except PANEL_ERRORS as e:
        raise to_http(e)
    return PanelJobResponse.model_validate(job)
