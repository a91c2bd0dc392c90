"""
Standardized error response messages and builders.

This module provides consistent error messages and HTTPException builders
for the entire API, so every failure maps to a distinct, stable outcome:

- 400: required field absent or mistyped
- 401: no credential presented
- 403: credential rejected, or attempt owned by someone else
- 404: no attempt in the expected state
- 409: active attempt already exists (when the guard is enabled)
- 500: storage failure

Error Message Format Guidelines:
- Use sentence case (capitalize first letter only)
- End with a period for complete sentences
- Include relevant IDs in parentheses when helpful for debugging: "(ID: 123)"
- Use "Please try again later." for transient server errors

Usage:
    from attempt_service.core.error_responses import ErrorMessages, raise_not_found

    raise_not_found(ErrorMessages.ACTIVE_ATTEMPT_NOT_FOUND)
"""

from typing import Iterable, NoReturn, Optional

from fastapi import HTTPException, status


class ErrorMessages:
    """Centralized error message constants and templates.

    Naming Convention:
    - Constants: SCREAMING_SNAKE_CASE for static messages
    - Methods: snake_case for templates that accept parameters
    """

    # ==========================================================================
    # Authentication Errors (401 / 403)
    # ==========================================================================
    ACCESS_TOKEN_REQUIRED = "Access token is required."
    INVALID_TOKEN = "Invalid or expired token."

    # ==========================================================================
    # Authorization Errors (403)
    # ==========================================================================
    ATTEMPT_ACCESS_DENIED = "Not authorized to access test attempts of this user."

    # ==========================================================================
    # Not Found Errors (404)
    # ==========================================================================
    ACTIVE_ATTEMPT_NOT_FOUND = "Active test attempt not found."
    NO_ATTEMPT_TO_UPDATE = "No test attempt with the expected status was found to update."

    # ==========================================================================
    # Conflict Errors (409)
    # ==========================================================================
    @staticmethod
    def active_attempt_exists(attempt_id: int) -> str:
        """Message for when the user already has an active attempt."""
        return (
            f"User already has an active test attempt (ID: {attempt_id}). "
            "Please complete the existing attempt before starting a new one."
        )

    # ==========================================================================
    # Bad Request Errors (400)
    # ==========================================================================
    @staticmethod
    def required_integer_fields(fields: Iterable[str]) -> str:
        """Message when required numeric fields are missing or mistyped."""
        return f"{', '.join(fields)} are required and must be integers."

    # ==========================================================================
    # Server Errors (500)
    # ==========================================================================
    @staticmethod
    def database_operation_failed(operation: str) -> str:
        """Generic message for database operation failures."""
        return f"Failed to {operation}. Please try again later."


# ==============================================================================
# HTTPException Builder Functions
# ==============================================================================


def raise_bad_request(detail: str) -> NoReturn:
    """Raise a 400 Bad Request exception.

    Args:
        detail: User-facing error message

    Raises:
        HTTPException: 400 Bad Request
    """
    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=detail,
    )


def raise_unauthorized(
    detail: str,
    include_www_authenticate: bool = True,
) -> NoReturn:
    """Raise a 401 Unauthorized exception.

    Use when no credential was presented at all.

    Args:
        detail: User-facing error message
        include_www_authenticate: Whether to include WWW-Authenticate header

    Raises:
        HTTPException: 401 Unauthorized
    """
    headers = {"WWW-Authenticate": "Bearer"} if include_www_authenticate else None
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers=headers,
    )


def raise_forbidden(detail: str) -> NoReturn:
    """Raise a 403 Forbidden exception.

    Use for rejected credentials and for ownership violations.

    Args:
        detail: User-facing error message

    Raises:
        HTTPException: 403 Forbidden
    """
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=detail,
    )


def raise_not_found(detail: str) -> NoReturn:
    """Raise a 404 Not Found exception.

    Args:
        detail: User-facing error message

    Raises:
        HTTPException: 404 Not Found
    """
    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=detail,
    )


def raise_conflict(detail: str) -> NoReturn:
    """Raise a 409 Conflict exception.

    Args:
        detail: User-facing error message

    Raises:
        HTTPException: 409 Conflict
    """
    raise HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=detail,
    )


def raise_server_error(
    detail: str,
    error_id: Optional[str] = None,
) -> NoReturn:
    """Raise a 500 Internal Server Error exception.

    Always use user-friendly messages; log technical details separately.

    Args:
        detail: User-facing error message (should be generic and friendly)
        error_id: Optional error tracking ID to include in response

    Raises:
        HTTPException: 500 Internal Server Error
    """
    if error_id:
        detail = f"{detail} (Error ID: {error_id})"

    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=detail,
    )
