# =============================================================================
# core/models/queue.py - Job Queue Dashboard Schemas
# =============================================================================

from typing import Any

from pydantic import BaseModel


class QueueSummary(BaseModel):
    """One queue and how many jobs are waiting in it."""
    name: str
    pending: int


class WorkerJob(BaseModel):
    """A job currently held by a worker (active, reserved or scheduled)."""
    id: str
    name: str | None = None
    worker: str
    state: str
    args: Any = None
    kwargs: Any = None
    eta: str | None = None


class QueueListResponse(BaseModel):
    queues: list[QueueSummary]
    workers: list[str]


class QueueDetailResponse(BaseModel):
    name: str
    pending: int
    jobs: list[WorkerJob]


class JobStatusResponse(BaseModel):
    """Status of a background job."""
    task_id: str
    status: str
    progress: int | None = None
    message: str | None = None
    result: Any = None
    error: str | None = None


class QueueCleanResponse(BaseModel):
    name: str
    removed: int
