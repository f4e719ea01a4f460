# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Authgate API:
# - test_config.py: Settings parsing, role/port selection
# - test_models.py / test_entities.py: Schemas and the verification record
# - test_verification_service.py: Database operations
# - test_verifications_api.py: HTTP surface, validation, serialization
# - test_queue_dashboard.py / test_queue_service.py: Job dashboard + auth
# - test_bootstrap.py: CORS, security headers, errors, Sentry, shutdown
# - test_lifespan.py: startup and shutdown order per role and environment
# - test_health.py: health endpoints and Redis client lifetime
# - test_websocket.py / test_workers.py / test_cookies.py / test_server.py
#
# Run tests with: poetry run pytest
# =============================================================================
