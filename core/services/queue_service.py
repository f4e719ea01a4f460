# =============================================================================
# core/services/queue_service.py - Job Queue Inspection
# =============================================================================
# Read-mostly view over the Celery queues backing the job dashboard:
# - pending counts come straight from the Redis lists the broker uses
# - active / reserved / scheduled jobs come from worker inspection
# - job status comes from the result backend
# =============================================================================

import logging
from typing import Any

from celery import Celery
from redis import Redis

from app.exceptions import QueueNotFoundError
from core.models.queue import (
    JobStatusResponse,
    QueueDetailResponse,
    QueueListResponse,
    QueueSummary,
    WorkerJob,
)

logger = logging.getLogger(__name__)

INSPECT_TIMEOUT = 1.0


class QueueService:
    """
    Inspect and maintain the Celery queues.

    Args:
        celery_app: The Celery application
        redis_client: Client for the broker's Redis database
        queue_names: Queues the dashboard is allowed to show
    """

    def __init__(self, celery_app: Celery, redis_client: Redis, queue_names: list[str]):
        self.celery_app = celery_app
        self.redis = redis_client
        self.queue_names = list(queue_names)

    # -------------------------------------------------------------------------
    # Queues
    # -------------------------------------------------------------------------

    def _require_queue(self, name: str) -> None:
        if name not in self.queue_names:
            raise QueueNotFoundError(name, self.queue_names)

    def pending_count(self, name: str) -> int:
        """Number of messages waiting in the broker for this queue."""
        return int(self.redis.llen(name))

    def list_queues(self) -> QueueListResponse:
        queues = [
            QueueSummary(name=name, pending=self.pending_count(name))
            for name in self.queue_names
        ]
        return QueueListResponse(queues=queues, workers=self.list_workers())

    def get_queue(self, name: str) -> QueueDetailResponse:
        """
        Details for one queue.

        Raises:
            QueueNotFoundError: If the queue isn't configured
        """
        self._require_queue(name)
        jobs = [job for job in self.worker_jobs() if job.pop("queue", None) == name]
        return QueueDetailResponse(
            name=name,
            pending=self.pending_count(name),
            jobs=[WorkerJob(**job) for job in jobs],
        )

    def clean_queue(self, name: str) -> int:
        """
        Drop every pending message in a queue.

        Returns:
            Number of messages removed
        """
        self._require_queue(name)
        with self.celery_app.connection_for_write() as connection:
            removed = connection.default_channel.queue_purge(name) or 0

        logger.warning(f"Purged {removed} pending jobs from queue {name}")
        return removed

    # -------------------------------------------------------------------------
    # Workers
    # -------------------------------------------------------------------------

    def _inspect(self):
        return self.celery_app.control.inspect(timeout=INSPECT_TIMEOUT)

    def list_workers(self) -> list[str]:
        try:
            replies = self._inspect().ping() or {}
        except Exception as e:
            logger.warning(f"Worker ping failed: {e}")
            return []
        return sorted(replies.keys())

    def worker_jobs(self) -> list[dict[str, Any]]:
        """
        Jobs currently held by workers, flattened across all workers.

        Each entry carries a `queue` key taken from the delivery info.
        """
        try:
            inspect = self._inspect()
            states = {
                "active": inspect.active() or {},
                "reserved": inspect.reserved() or {},
                "scheduled": inspect.scheduled() or {},
            }
        except Exception as e:
            logger.warning(f"Worker inspection failed: {e}")
            return []

        jobs = []
        for state, by_worker in states.items():
            for worker, entries in by_worker.items():
                for entry in entries:
                    # Scheduled entries wrap the request and add an ETA
                    request = entry.get("request", entry)
                    delivery = request.get("delivery_info") or {}
                    jobs.append({
                        "id": request.get("id", ""),
                        "name": request.get("name"),
                        "worker": worker,
                        "state": state,
                        "args": request.get("args"),
                        "kwargs": request.get("kwargs"),
                        "eta": entry.get("eta"),
                        "queue": delivery.get("routing_key"),
                    })
        return jobs

    # -------------------------------------------------------------------------
    # Jobs
    # -------------------------------------------------------------------------

    def job_status(self, task_id: str) -> JobStatusResponse:
        """
        Get the status of a background job.

        Returns the current state of the job:
        - PENDING: Waiting in queue (or unknown)
        - STARTED: Picked up by a worker
        - PROGRESS: Running (includes progress percentage)
        - SUCCESS: Completed
        - FAILURE: Failed
        """
        result = self.celery_app.AsyncResult(task_id)
        response = JobStatusResponse(task_id=task_id, status=result.status)

        if result.status == "PROGRESS":
            info = result.info or {}
            response.progress = info.get("percent", 0)
            response.message = info.get("message", "Processing...")

        elif result.status == "SUCCESS":
            response.result = result.result
            response.progress = 100
            response.message = "Complete"

        elif result.status == "FAILURE":
            response.error = str(result.result) if result.result else "Unknown error"
            response.message = "Failed"

        elif result.status == "PENDING":
            response.progress = 0
            response.message = "Waiting in queue..."

        elif result.status == "STARTED":
            response.progress = 0
            response.message = "Starting..."

        return response
