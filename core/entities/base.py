# =============================================================================
# core/entities/base.py - Shared ORM Base
# =============================================================================
# One declarative Base (single metadata registry) plus the abstract
# BaseEntity carrying the columns every table shares.
# =============================================================================

import uuid

from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import declarative_base

from lib.utils import utcnow

Base = declarative_base()


class BaseEntity(Base):
    """
    Abstract base for all tables.

    Columns:
        id: String UUID primary key
        createdAt: Set on insert
        updatedAt: Set on insert, refreshed on every update
    """

    __abstract__ = True

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    created_at = Column("createdAt", DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(
        "updatedAt",
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} id={self.id}>"
