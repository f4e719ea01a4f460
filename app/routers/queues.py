# =============================================================================
# app/routers/queues.py - Job Queue Dashboard
# =============================================================================
# Read and maintain the background job queues. Mounted at /api/queues in
# both main and worker mode; every request is authenticated by
# QueueDashboardAuthMiddleware before it gets here.
# =============================================================================

import logging
from typing import Annotated, Iterator

from fastapi import APIRouter, Depends, Path

from core.models.queue import (
    JobStatusResponse,
    QueueCleanResponse,
    QueueDetailResponse,
    QueueListResponse,
)
from core.services.queue_service import QueueService

logger = logging.getLogger(__name__)

router = APIRouter()


def get_queue_service() -> Iterator[QueueService]:
    """
    Build the QueueService over the shared Celery app and its Redis broker.

    The Redis client lives for one request and is closed afterwards.
    """
    import redis

    from app.config import settings
    from workers.celery_app import celery_app
    from workers.config import QUEUE_NAMES

    redis_client = redis.from_url(settings.REDIS_URL)
    try:
        yield QueueService(
            celery_app=celery_app,
            redis_client=redis_client,
            queue_names=QUEUE_NAMES,
        )
    finally:
        redis_client.close()


QueueServiceDep = Annotated[QueueService, Depends(get_queue_service)]


@router.get("", response_model=QueueListResponse)
def list_queues(service: QueueServiceDep):
    """
    List every queue with its pending job count, plus the workers that
    answered a ping.
    """
    return service.list_queues()


@router.get("/jobs/{task_id}", response_model=JobStatusResponse)
def get_job_status(
    task_id: Annotated[str, Path(description="Celery task ID")],
    service: QueueServiceDep,
):
    """
    Get the status of a background job.

    PENDING, STARTED, PROGRESS, SUCCESS or FAILURE, with progress,
    result or error where available.
    """
    return service.job_status(task_id)


@router.get("/{queue}", response_model=QueueDetailResponse)
def get_queue(
    queue: Annotated[str, Path(description="Queue name")],
    service: QueueServiceDep,
):
    """Pending count and the jobs workers currently hold for one queue."""
    return service.get_queue(queue)


@router.post("/{queue}/clean", response_model=QueueCleanResponse)
def clean_queue(
    queue: Annotated[str, Path(description="Queue name")],
    service: QueueServiceDep,
):
    """Remove every pending job from a queue."""
    removed = service.clean_queue(queue)
    return QueueCleanResponse(name=queue, removed=removed)
