# =============================================================================
# workers/config.py - Celery Worker Configuration
# =============================================================================
# Settings specific to Celery workers.
# =============================================================================

from app.config import settings

DEFAULT_QUEUE = "default"
MAINTENANCE_QUEUE = "maintenance"

QUEUE_NAMES = [DEFAULT_QUEUE, MAINTENANCE_QUEUE]


class CeleryConfig:
    """
    Celery configuration settings.

    These are applied to the Celery app via app.config_from_object().
    """

    # -------------------------------------------------------------------------
    # Broker Settings (Redis)
    # -------------------------------------------------------------------------

    broker_url = settings.REDIS_URL
    result_backend = settings.REDIS_URL

    # -------------------------------------------------------------------------
    # Task Settings
    # -------------------------------------------------------------------------

    # Acknowledge tasks after they complete (not before)
    task_acks_late = True

    # Only prefetch one task at a time
    worker_prefetch_multiplier = 1

    # Task results expire after 1 hour
    result_expires = 3600

    task_time_limit = 300
    task_soft_time_limit = 240

    # Report STARTED so the dashboard can tell queued from running jobs
    task_track_started = True

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    task_serializer = "json"
    result_serializer = "json"
    accept_content = ["json"]

    # -------------------------------------------------------------------------
    # Task Routing
    # -------------------------------------------------------------------------

    task_queues = {
        DEFAULT_QUEUE: {
            "exchange": DEFAULT_QUEUE,
            "routing_key": DEFAULT_QUEUE,
        },
        MAINTENANCE_QUEUE: {
            "exchange": MAINTENANCE_QUEUE,
            "routing_key": MAINTENANCE_QUEUE,
        },
    }

    task_routes = {
        "workers.tasks.purge_expired_verifications": {"queue": MAINTENANCE_QUEUE},
    }

    task_default_queue = DEFAULT_QUEUE

    # -------------------------------------------------------------------------
    # Periodic Tasks (beat)
    # -------------------------------------------------------------------------

    beat_schedule = {
        "purge-expired-verifications": {
            "task": "workers.tasks.purge_expired_verifications",
            "schedule": float(settings.VERIFICATION_PURGE_INTERVAL),
        },
    }

    # -------------------------------------------------------------------------
    # Monitoring
    # -------------------------------------------------------------------------

    # Send task events so the queue dashboard can inspect workers
    worker_send_task_events = True
    task_send_sent_event = True

    # -------------------------------------------------------------------------
    # Timezone
    # -------------------------------------------------------------------------

    timezone = "UTC"
    enable_utc = True
