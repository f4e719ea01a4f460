# =============================================================================
# workers/tasks.py - Celery Task Definitions
# =============================================================================
# Background jobs run by the worker process.
#
# Tasks:
# - purge_expired_verifications: Periodic cleanup of expired records
# =============================================================================

import logging
from typing import Any

from celery import shared_task

logger = logging.getLogger(__name__)

VERIFICATIONS_ROOM = "verifications"


@shared_task(bind=True, name="workers.tasks.purge_expired_verifications")
def purge_expired_verifications(self) -> dict[str, Any]:
    """
    Delete every verification whose expiresAt has passed.

    Scheduled by celery beat (see CeleryConfig.beat_schedule) and
    broadcasts a `verifications_purged` event to WebSocket clients.

    Returns:
        Dict with the number of deleted rows
    """
    from app.websocket.broadcast import publish_event
    from core.database import SessionLocal
    from core.services.verification_service import VerificationService

    db = SessionLocal()
    try:
        deleted = VerificationService.purge_expired(db)
    finally:
        db.close()

    if deleted:
        publish_event(VERIFICATIONS_ROOM, "verifications_purged", {"deleted": deleted})

    return {"success": True, "deleted": deleted}
