"""Run endpoint -- executes a manifest and returns its summary."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from maestro.api.v1.schemas.common import ErrorResponse
from maestro.api.v1.schemas.run import RunRequest, RunResponse, RunResultInfo
from maestro.dependencies import build_scheduler, get_handler_registry, get_manifest_locks
from maestro.handlers.registry import HandlerRegistry
from maestro.manifest.updater import ManifestLocks
from maestro.utils.logging import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.post(
    "/runs",
    response_model=RunResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Manifest not found"},
        500: {"model": ErrorResponse, "description": "Output directory unavailable"},
    },
    summary="Run a manifest",
    description=(
        "Load the manifest, run every task that is not yet completed, rewrite "
        "the manifest in place and return the execution summary."
    ),
)
async def create_run(
    body: RunRequest,
    registry: HandlerRegistry = Depends(get_handler_registry),
    manifest_locks: ManifestLocks = Depends(get_manifest_locks),
) -> RunResponse:
    scheduler = build_scheduler(registry, body.reports_dir, manifest_locks=manifest_locks)
    tasks = scheduler.load_manifest(body.manifest_path)
    titles = {task.id: task.title for task in tasks}

    logger.info("api_run_requested", manifest_path=body.manifest_path, tasks=len(tasks))
    summary = await scheduler.run()

    return RunResponse(
        total_tasks=summary.total_tasks,
        success_count=summary.success_count,
        failure_count=summary.failure_count,
        success_rate=summary.success_rate,
        duration_seconds=summary.duration_seconds,
        run_dir=str(scheduler.run_dir),
        results=[
            RunResultInfo(
                task_id=r.task_id,
                title=titles.get(r.task_id, ""),
                status=r.status,
                notes=r.notes,
                generated_files=r.generated_files or [],
                pull_request_url=r.pull_request_url,
                completed_at=r.completed_at,
            )
            for r in summary.results
        ],
    )
