# =============================================================================
# core/models/verification.py - Verification Schemas
# =============================================================================
# These models define the API contract for verification records:
# - VerificationCreate: Input for creating a record
# - VerificationUpdate: Partial update of value / expiry
# - VerificationCheck: Identifier + value pair to validate
# - VerificationResponse: Output (never includes the secret value)
# =============================================================================

from datetime import datetime, timedelta
from typing import Annotated

from pydantic import Field, StringConstraints, computed_field, model_validator

from core.models.base import ResponseModel, StrictModel
from lib.utils import as_utc, utcnow

MAX_EXPIRES_IN_SECONDS = 30 * 24 * 3600

# Identifiers are trimmed; values are compared byte for byte and kept as sent
Identifier = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]


class VerificationCreate(StrictModel):
    """
    Schema for creating a verification record.

    Supply either an absolute `expires_at` or a relative `expires_in_seconds`.

    Example:
        {
            "identifier": "user@example.com",
            "value": "8f14e45f",
            "expires_in_seconds": 900
        }
    """

    identifier: Identifier = Field(
        ...,
        description="Subject being verified (e.g. an email address)"
    )
    value: str = Field(
        ...,
        min_length=1,
        max_length=1024,
        description="Verification token or secret"
    )
    expires_at: datetime | None = Field(
        default=None,
        description="Absolute expiry"
    )
    expires_in_seconds: int | None = Field(
        default=None,
        ge=1,
        le=MAX_EXPIRES_IN_SECONDS,
        description="Relative expiry, from now"
    )

    @model_validator(mode="after")
    def _exactly_one_expiry(self) -> "VerificationCreate":
        if (self.expires_at is None) == (self.expires_in_seconds is None):
            raise ValueError("Provide exactly one of expires_at or expires_in_seconds")
        return self

    def resolve_expires_at(self, now: datetime | None = None) -> datetime:
        """Absolute expiry as an aware UTC datetime."""
        if self.expires_at is not None:
            return as_utc(self.expires_at)
        return (now or utcnow()) + timedelta(seconds=self.expires_in_seconds)


class VerificationUpdate(StrictModel):
    """Partial update. Only supplied fields are changed."""

    value: str | None = Field(default=None, min_length=1, max_length=1024)
    expires_at: datetime | None = None


class VerificationCheck(StrictModel):
    """Identifier/value pair to validate against stored records."""

    identifier: Identifier
    value: str = Field(..., min_length=1, max_length=1024)
    consume: bool = Field(
        default=True,
        description="Delete the record once it has been validated"
    )


class VerificationResponse(ResponseModel):
    """
    Schema for returning a verification record to clients.

    The `value` column is deliberately absent.
    """

    id: str
    identifier: str
    expires_at: datetime
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @computed_field
    @property
    def expired(self) -> bool:
        return as_utc(self.expires_at) <= utcnow()


class VerificationCheckResponse(ResponseModel):
    """Result of a check: whether it passed and, if so, which record matched."""

    valid: bool
    consumed: bool = False
    verification: VerificationResponse | None = None
