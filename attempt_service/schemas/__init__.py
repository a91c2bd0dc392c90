"""
Pydantic schemas for request/response validation.
"""
from .attempts import (
    ActiveAttemptResponse,
    AttemptCreateRequest,
    AttemptCreatedResponse,
    AttemptLookupRequest,
    AttemptsUpdatedResponse,
    AttemptTransitionRequest,
    TestAttemptResponse,
)

__all__ = [
    "ActiveAttemptResponse",
    "AttemptCreateRequest",
    "AttemptCreatedResponse",
    "AttemptLookupRequest",
    "AttemptsUpdatedResponse",
    "AttemptTransitionRequest",
    "TestAttemptResponse",
]
