# =============================================================================
# core/entities/ - ORM Entities
# =============================================================================
# SQLAlchemy-mapped tables. Every entity must be imported here so that
# Base.metadata knows about it before create_all() runs.
# =============================================================================

from core.entities.base import Base, BaseEntity
from core.entities.verification import Verification

__all__ = [
    "Base",
    "BaseEntity",
    "Verification",
]
