# routers/job_router.py

"""
Import Job API Routes
"""

import logging
from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse
from typing import List

from identity_console.core.config import settings
from identity_console.models.job import (
    JobSnapshot,
    OperationResult,
    ResultFilter,
    SettingsUpdate,
    StartJobRequest
)
from identity_console.routers.deps import get_job_service
from identity_console.services.job_service import JobService
from identity_console.services.reporting import build_snapshot, export_results, filter_results

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{settings.api_prefix}/jobs", tags=["Import Jobs"])


@router.get("/{account_id}", response_model=JobSnapshot)
async def get_job(account_id: str, service: JobService = Depends(get_job_service)):
    """Current state of the account's import job"""
    return build_snapshot(account_id, service.get_snapshot(account_id))


@router.post("/{account_id}/start", response_model=JobSnapshot)
async def start_job(
        account_id: str,
        request: StartJobRequest,
        service: JobService = Depends(get_job_service)
):
    """Start a bulk import in the background"""
    logger.info(f"POST /api/jobs/{account_id}/start")
    record = await service.start(
        account_id,
        user_data=request.user_data,
        users=[u.model_dump() for u in request.users] if request.users is not None else None,
        send_invites=request.send_invites,
        delay_in_seconds=request.delay_in_seconds
    )
    return build_snapshot(account_id, record)


@router.post("/{account_id}/pause", response_model=JobSnapshot)
async def pause_job(account_id: str, service: JobService = Depends(get_job_service)):
    logger.info(f"POST /api/jobs/{account_id}/pause")
    return build_snapshot(account_id, await service.pause(account_id))


@router.post("/{account_id}/resume", response_model=JobSnapshot)
async def resume_job(account_id: str, service: JobService = Depends(get_job_service)):
    logger.info(f"POST /api/jobs/{account_id}/resume")
    return build_snapshot(account_id, await service.resume(account_id))


@router.post("/{account_id}/stop", response_model=JobSnapshot)
async def stop_job(account_id: str, service: JobService = Depends(get_job_service)):
    """Request a stop.

    The returned snapshot carries `stop_requested=true` and keeps its running or
    paused status until the loop finishes its current step and reports `stopped`.
    """
    logger.info(f"POST /api/jobs/{account_id}/stop")
    return build_snapshot(account_id, await service.stop(account_id))


@router.delete("/{account_id}", response_model=JobSnapshot)
async def clear_job(account_id: str, service: JobService = Depends(get_job_service)):
    """Reset input, settings and results"""
    logger.info(f"DELETE /api/jobs/{account_id}")
    return build_snapshot(account_id, await service.clear(account_id))


@router.patch("/{account_id}/settings", response_model=JobSnapshot)
async def update_job_settings(
        account_id: str,
        request: SettingsUpdate,
        service: JobService = Depends(get_job_service)
):
    record = await service.update_settings(
        account_id,
        user_data=request.user_data,
        send_invites=request.send_invites,
        delay_in_seconds=request.delay_in_seconds
    )
    return build_snapshot(account_id, record)


@router.post("/{account_id}/generate-passwords", response_model=JobSnapshot)
async def generate_passwords(account_id: str, service: JobService = Depends(get_job_service)):
    """Add a generated password to every pending user that lacks one"""
    logger.info(f"POST /api/jobs/{account_id}/generate-passwords")
    return build_snapshot(account_id, await service.generate_passwords(account_id))


@router.get("/{account_id}/results", response_model=List[OperationResult])
async def get_job_results(
        account_id: str,
        filter: ResultFilter = Query(ResultFilter.ALL),
        service: JobService = Depends(get_job_service)
):
    return filter_results(service.get_snapshot(account_id), filter)


@router.get("/{account_id}/export", response_class=PlainTextResponse)
async def export_job_results(
        account_id: str,
        filter: ResultFilter = Query(ResultFilter.ALL),
        service: JobService = Depends(get_job_service)
):
    """Download results as CSV"""
    content = export_results(service.get_snapshot(account_id), filter)
    return PlainTextResponse(
        content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="import-results-{filter.value}.csv"'}
    )
