# =============================================================================
# core/models/base.py - Shared Schema Bases
# =============================================================================
# Request bodies reject fields they don't declare; the API answers such
# requests with 422 instead of silently dropping the extra data.
# =============================================================================

from pydantic import BaseModel, ConfigDict


class StrictModel(BaseModel):
    """Base for request bodies: unknown fields are a validation error."""

    model_config = ConfigDict(extra="forbid")


class ResponseModel(BaseModel):
    """Base for responses built from ORM objects."""

    model_config = ConfigDict(from_attributes=True)
