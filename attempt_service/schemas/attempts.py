"""
Pydantic schemas for test attempt endpoints.

Request schemas use strict integers: a field is accepted only when it is
present and an actual integer. 0 is a valid value; booleans, floats and
numeric strings are rejected.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator

from attempt_service.core.datetime_utils import ensure_timezone_aware


class AttemptCreateRequest(BaseModel):
    """Schema for creating a test attempt."""

    user_id: StrictInt = Field(..., description="Owner of the attempt")
    test_id: StrictInt = Field(..., description="Opaque test identifier")
    status: StrictInt = Field(..., description="Initial status code (1 = active)")


class AttemptTransitionRequest(BaseModel):
    """Schema for moving a user's attempts from one status to another.

    On the wire the target status is sent as ``status``.
    """

    model_config = ConfigDict(populate_by_name=True)

    user_id: StrictInt = Field(..., description="Owner of the attempts")
    score: StrictInt = Field(..., description="Score to record")
    new_status: StrictInt = Field(
        ..., alias="status", description="Status to move the attempts to"
    )
    old_status: StrictInt = Field(
        ..., description="Status the attempts must currently have"
    )


class AttemptLookupRequest(BaseModel):
    """Schema for listing attempts or fetching the active attempt."""

    user_id: StrictInt = Field(..., description="Owner of the attempts")


class TestAttemptResponse(BaseModel):
    """Schema for a stored test attempt."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Attempt ID")
    user_id: int = Field(..., description="User ID")
    test_id: int = Field(..., description="Test ID")
    status: int = Field(..., description="Status code (1 = active)")
    score: Optional[int] = Field(None, description="Score, set on completion")
    started_at: datetime = Field(..., description="Attempt start timestamp")
    completed_at: Optional[datetime] = Field(
        None, description="Attempt completion timestamp"
    )

    @field_validator("started_at", "completed_at")
    @classmethod
    def as_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_timezone_aware(v) if v is not None else None


class AttemptCreatedResponse(BaseModel):
    """Schema returned after creating an attempt."""

    message: str = Field(..., description="Success message")
    test: TestAttemptResponse = Field(..., description="Created attempt")


class AttemptsUpdatedResponse(BaseModel):
    """Schema returned after a successful status transition."""

    message: str = Field(..., description="Success message")
    updated: List[TestAttemptResponse] = Field(
        ..., description="Every attempt the transition matched"
    )


class ActiveAttemptResponse(BaseModel):
    """Schema for the user's active attempt."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Attempt ID")
    test_id: int = Field(..., description="Test ID")
    started_at: datetime = Field(..., description="Attempt start timestamp")
    status: int = Field(..., description="Status code, always 1")

    @field_validator("started_at")
    @classmethod
    def as_utc(cls, v: datetime) -> datetime:
        return ensure_timezone_aware(v)
