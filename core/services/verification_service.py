# =============================================================================
# core/services/verification_service.py - Verification Business Logic
# =============================================================================
# Handles verification CRUD operations and token checks.
# Separates HTTP concerns from database/business logic.
# =============================================================================

import logging
from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.exceptions import VerificationNotFoundError
from core.entities import Verification
from core.models.verification import VerificationCreate, VerificationUpdate
from lib.utils import as_utc, utcnow

logger = logging.getLogger(__name__)


class VerificationService:
    """
    Service for verification record operations.

    Provides a clean interface between API routes / workers and the database.
    Every method takes the SQLAlchemy session it should use.
    """

    @staticmethod
    def create(db: Session, payload: VerificationCreate) -> Verification:
        """
        Create a verification record.

        Args:
            db: Database session
            payload: Identifier, value and expiry

        Returns:
            The persisted Verification
        """
        verification = Verification(
            identifier=payload.identifier,
            value=payload.value,
            expires_at=payload.resolve_expires_at(),
        )
        db.add(verification)
        db.commit()
        db.refresh(verification)

        logger.info(f"Created verification {verification.id} for {verification.identifier}")
        return verification

    @staticmethod
    def get(db: Session, verification_id: str) -> Verification:
        """
        Get a verification by ID.

        Raises:
            VerificationNotFoundError: If it doesn't exist
        """
        verification = db.get(Verification, verification_id)
        if verification is None:
            raise VerificationNotFoundError(verification_id)
        return verification

    @staticmethod
    def list(
        db: Session,
        identifier: str | None = None,
        include_expired: bool = True,
        skip: int = 0,
        limit: int = 100,
    ) -> list[Verification]:
        """List verifications, newest first."""
        query = select(Verification)
        if identifier:
            query = query.where(Verification.identifier == identifier)
        if not include_expired:
            query = query.where(Verification.expires_at > utcnow())

        query = query.order_by(Verification.created_at.desc()).offset(skip).limit(limit)
        return list(db.scalars(query))

    @staticmethod
    def update(db: Session, verification_id: str, payload: VerificationUpdate) -> Verification:
        """Apply the fields that were explicitly set on `payload`."""
        verification = VerificationService.get(db, verification_id)

        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        if "expires_at" in changes:
            changes["expires_at"] = as_utc(changes["expires_at"])
        for field, value in changes.items():
            setattr(verification, field, value)

        db.commit()
        db.refresh(verification)

        logger.info(f"Updated verification {verification_id}: {sorted(changes)}")
        return verification

    @staticmethod
    def delete(db: Session, verification_id: str) -> None:
        verification = VerificationService.get(db, verification_id)
        db.delete(verification)
        db.commit()
        logger.info(f"Deleted verification {verification_id}")

    @staticmethod
    def find_valid(
        db: Session,
        identifier: str,
        value: str,
        now: datetime | None = None,
    ) -> Verification | None:
        """
        Find the newest unexpired record matching identifier and value.

        Returns:
            The Verification, or None when nothing valid matches
        """
        reference = as_utc(now) if now else utcnow()
        query = (
            select(Verification)
            .where(
                Verification.identifier == identifier,
                Verification.value == value,
                Verification.expires_at > reference,
            )
            .order_by(Verification.created_at.desc())
            .limit(1)
        )
        return db.scalars(query).first()

    @staticmethod
    def consume(db: Session, identifier: str, value: str) -> Verification | None:
        """
        Validate and delete in one step, so a token can only be used once.

        Returns:
            The consumed Verification (detached), or None
        """
        reference = utcnow()
        verification = VerificationService.find_valid(db, identifier, value, now=reference)
        if verification is None:
            logger.info(f"Verification check failed for {identifier}")
            return None

        # Only the request whose DELETE removes the row wins
        result = db.execute(
            delete(Verification)
            .where(
                Verification.id == verification.id,
                Verification.expires_at > reference,
            )
            .execution_options(synchronize_session=False)
        )
        db.commit()
        db.expunge(verification)

        if result.rowcount != 1:
            logger.info(f"Verification {verification.id} was already consumed")
            return None

        logger.info(f"Consumed verification {verification.id} for {identifier}")
        return verification

    @staticmethod
    def purge_expired(db: Session, now: datetime | None = None) -> int:
        """
        Delete every expired record.

        Returns:
            Number of rows deleted
        """
        reference = as_utc(now) if now else utcnow()
        result = db.execute(
            delete(Verification)
            .where(Verification.expires_at <= reference)
            .execution_options(synchronize_session=False)
        )
        db.commit()

        deleted = result.rowcount or 0
        logger.info(f"Purged {deleted} expired verifications")
        return deleted
