# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains framework-agnostic business logic:
# - database.py: SQLAlchemy engine, sessions and health probe
# - entities/: ORM-mapped tables
# - models/: Pydantic schemas for data validation
# - services/: Verification and job queue operations
#
# Code in this package should NOT import from FastAPI or Celery routes.
# This keeps the logic testable and reusable.
# =============================================================================
