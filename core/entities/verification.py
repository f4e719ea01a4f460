# =============================================================================
# core/entities/verification.py - Verification Record
# =============================================================================
# A pending verification challenge: a token (value) tied to the subject being
# verified (identifier), valid until expiresAt.
#
# Table layout follows the better-auth core schema:
#   https://www.better-auth.com/docs/concepts/database#core-schema
# =============================================================================

from datetime import datetime

from sqlalchemy import Column, DateTime, String

from core.entities.base import BaseEntity
from lib.utils import as_utc, utcnow


class Verification(BaseEntity):
    __tablename__ = "verification"

    # Not unique: one identifier may have several outstanding tokens
    identifier = Column(String(255), nullable=False)
    value = Column(String(1024), nullable=False)
    expires_at = Column("expiresAt", DateTime(timezone=True), nullable=False)

    def is_expired(self, now: datetime | None = None) -> bool:
        """True once expiresAt is at or before `now` (defaults to the current UTC time)."""
        reference = as_utc(now) if now else utcnow()
        return as_utc(self.expires_at) <= reference
