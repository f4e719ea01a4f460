# =============================================================================
# workers/ - Celery Background Task Workers
# =============================================================================
# This package contains the Celery configuration and task definitions for
# background processing.
#
# Components:
# - celery_app.py: Celery application configuration
# - tasks.py: Task definitions (expired verification purge)
# - config.py: Worker-specific settings and queue names
# - embedded.py: Child-process worker used by the server in worker mode
#
# Usage:
#   # Start worker standalone
#   celery -A workers.celery_app worker --beat --loglevel=info
#
#   # Or run the app in worker mode (HTTP on APP_WORKER_PORT + worker)
#   IS_WORKER=true authgate
# =============================================================================

from .celery_app import celery_app
from . import tasks

__all__ = [
    "celery_app",
    "tasks",
]
