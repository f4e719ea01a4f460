# =============================================================================
# app/routers/ - API Route Handlers
# =============================================================================
# - health.py: Health, readiness and liveness checks
# - verifications.py: Verification record CRUD and checks
# - queues.py: Job queue dashboard (auth-gated)
# =============================================================================

from app.routers import health, queues, verifications

__all__ = ["health", "queues", "verifications"]
