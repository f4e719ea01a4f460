# =============================================================================
# app/routers/verifications.py - Verification Endpoints
# =============================================================================
# CRUD and check endpoints for verification records (main mode only).
# Request bodies reject unknown fields with 422.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Response, status
from sqlalchemy.orm import Session

from core.database import get_db
from core.models.verification import (
    VerificationCheck,
    VerificationCheckResponse,
    VerificationCreate,
    VerificationResponse,
    VerificationUpdate,
)
from core.services.verification_service import VerificationService

router = APIRouter()

DbDep = Annotated[Session, Depends(get_db)]
VerificationId = Annotated[str, Path(description="Verification ID", max_length=64)]


@router.post("", response_model=VerificationResponse, status_code=status.HTTP_201_CREATED)
def create_verification(payload: VerificationCreate, db: DbDep):
    """
    Create a verification record.

    The stored value is never returned by any endpoint.
    """
    return VerificationService.create(db, payload)


@router.get("", response_model=list[VerificationResponse])
def list_verifications(
    db: DbDep,
    identifier: str | None = Query(default=None, max_length=255),
    include_expired: bool = Query(default=True),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=500),
):
    """List verification records, newest first."""
    return VerificationService.list(
        db,
        identifier=identifier,
        include_expired=include_expired,
        skip=skip,
        limit=limit,
    )


@router.post("/check", response_model=VerificationCheckResponse)
def check_verification(payload: VerificationCheck, db: DbDep):
    """
    Check an identifier/value pair.

    Only unexpired records match. With `consume` (the default) a matching
    record is deleted so it can't be used twice.
    """
    if payload.consume:
        verification = VerificationService.consume(db, payload.identifier, payload.value)
    else:
        verification = VerificationService.find_valid(db, payload.identifier, payload.value)

    if verification is None:
        return VerificationCheckResponse(valid=False)

    return VerificationCheckResponse(
        valid=True,
        consumed=payload.consume,
        verification=VerificationResponse.model_validate(verification),
    )


@router.get("/{verification_id}", response_model=VerificationResponse)
def get_verification(verification_id: VerificationId, db: DbDep):
    return VerificationService.get(db, verification_id)


@router.patch("/{verification_id}", response_model=VerificationResponse)
def update_verification(verification_id: VerificationId, payload: VerificationUpdate, db: DbDep):
    """Change the value and/or expiry of a record."""
    return VerificationService.update(db, verification_id, payload)


@router.delete("/{verification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_verification(verification_id: VerificationId, db: DbDep):
    VerificationService.delete(db, verification_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
