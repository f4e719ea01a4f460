# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - base.py: StrictModel (request bodies) and ResponseModel (ORM output)
# - verification.py: Verification CRUD and check schemas
# - queue.py: Job queue dashboard schemas
#
# These models define the "contract" between API and clients.
# =============================================================================

from .base import ResponseModel, StrictModel
from .queue import (
    JobStatusResponse,
    QueueCleanResponse,
    QueueDetailResponse,
    QueueListResponse,
    QueueSummary,
    WorkerJob,
)
from .verification import (
    VerificationCheck,
    VerificationCheckResponse,
    VerificationCreate,
    VerificationResponse,
    VerificationUpdate,
)

__all__ = [
    # Bases
    "ResponseModel",
    "StrictModel",
    # Verification
    "VerificationCheck",
    "VerificationCheckResponse",
    "VerificationCreate",
    "VerificationResponse",
    "VerificationUpdate",
    # Queue dashboard
    "JobStatusResponse",
    "QueueCleanResponse",
    "QueueDetailResponse",
    "QueueListResponse",
    "QueueSummary",
    "WorkerJob",
]
