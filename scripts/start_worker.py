#!/usr/bin/env python3
# =============================================================================
# scripts/start_worker.py - Standalone Celery Worker
# =============================================================================
# Starts a Celery worker (with beat) without the worker-mode HTTP server.
# Use this when the dashboard is served by the main process only.
#
# Usage:
#   poetry run python scripts/start_worker.py
#
#   # Or use Celery CLI directly
#   poetry run celery -A workers.celery_app worker --beat --loglevel=info
#
# Prerequisites:
#   - Redis must be running
#   - Environment variables must be set (.env file)
# =============================================================================

from app.config import settings
from workers.celery_app import celery_app
from workers.config import QUEUE_NAMES


def main():
    """Start the Celery worker."""
    print("=" * 60)
    print("Authgate Celery Worker")
    print("=" * 60)
    print()
    print("Starting worker...")
    print("Press Ctrl+C to stop")
    print()

    celery_app.worker_main([
        "worker",
        "--loglevel=info",
        f"--concurrency={settings.WORKER_CONCURRENCY}",
        f"--queues={','.join(QUEUE_NAMES)}",
        "--beat",
    ])


if __name__ == "__main__":
    main()
