# =============================================================================
# core/services/ - Business Logic Services
# =============================================================================
# - verification_service.py: Verification CRUD, checks and purging
# - queue_service.py: Job queue inspection for the dashboard
# =============================================================================

from core.services.queue_service import QueueService
from core.services.verification_service import VerificationService

__all__ = [
    "QueueService",
    "VerificationService",
]
