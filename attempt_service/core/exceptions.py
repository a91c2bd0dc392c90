"""
Domain exceptions for authentication and the attempt lifecycle.

These are raised by the token gate, the lifecycle manager and the attempt
store, none of which know about HTTP. The request layer translates them into
HTTP responses (see attempt_service.api.v1.attempts).
"""
from typing import Any, Dict, List, Optional


class AttemptServiceError(Exception):
    """Base class for all domain errors raised by the service."""


# =============================================================================
# Authentication
# =============================================================================


class AuthenticationError(AttemptServiceError):
    """Base class for token gate rejections."""


class MissingCredentialError(AuthenticationError):
    """No configured carrier yielded a credential."""

    def __init__(self, carriers: Optional[List[str]] = None):
        self.carriers = list(carriers or [])
        super().__init__(
            f"No credential found in carriers: {', '.join(self.carriers) or 'none'}"
        )


class InvalidCredentialError(AuthenticationError):
    """Credential is malformed, wrongly signed, expired or lacks an identity."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid credential: {reason}")


# =============================================================================
# Attempt lifecycle
# =============================================================================


class InvalidInputError(AttemptServiceError):
    """A required field is absent or has the wrong type."""

    def __init__(self, operation: str, errors: List[Dict[str, Any]]):
        self.operation = operation
        self.errors = errors
        self.fields = sorted(
            {str(error["loc"][0]) for error in errors if error.get("loc")}
        )
        super().__init__(
            f"Invalid input for {operation}: {', '.join(self.fields) or 'body'}"
        )


class AttemptNotFoundError(AttemptServiceError):
    """No attempt matched the lookup or transition predicate.

    Attributes:
        operation: "transition" or "get active", the operation that found nothing
    """

    def __init__(self, operation: str, user_id: int, status: int):
        self.operation = operation
        self.user_id = user_id
        self.status = status
        super().__init__(
            f"{operation}: no attempt with status {status} for user {user_id}"
        )


class AttemptConflictError(AttemptServiceError):
    """Creating the attempt would violate the single-active-attempt guard."""

    def __init__(self, user_id: int, active_attempt_id: int):
        self.user_id = user_id
        self.active_attempt_id = active_attempt_id
        super().__init__(
            f"User {user_id} already has an active attempt (ID: {active_attempt_id})"
        )


class AttemptForbiddenError(AttemptServiceError):
    """The request targets attempts owned by another principal."""

    def __init__(self, principal_id: Any, user_id: int):
        self.principal_id = principal_id
        self.user_id = user_id
        super().__init__(
            f"Principal {principal_id} may not act on attempts of user {user_id}"
        )


class StorageError(AttemptServiceError):
    """Raised when a storage operation fails.

    Wraps the underlying database error with the name of the operation that
    failed. Storage errors are propagated to the caller, never retried.

    Attributes:
        operation_name: Human-readable name of the operation that failed
        original_error: The underlying exception that caused the failure
        message: The formatted error message
    """

    def __init__(
        self,
        operation_name: str,
        original_error: Exception,
        message: Optional[str] = None,
    ):
        self.operation_name = operation_name
        self.original_error = original_error
        self.message = message or f"Failed to {operation_name}: {str(original_error)}"
        super().__init__(self.message)
