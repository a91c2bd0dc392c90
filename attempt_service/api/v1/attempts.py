"""
Test attempt endpoints.

Every endpoint requires an authenticated principal and accepts its fields as
a raw JSON body; field presence and type are checked by the lifecycle
manager so that missing or mistyped fields map to 400 rather than 422.
"""
import logging
import uuid
from typing import Any, List, NoReturn

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from attempt_service.core.auth import Principal, get_current_principal
from attempt_service.core.config import settings
from attempt_service.core.error_responses import (
    ErrorMessages,
    raise_bad_request,
    raise_conflict,
    raise_forbidden,
    raise_not_found,
    raise_server_error,
)
from attempt_service.core.exceptions import (
    AttemptConflictError,
    AttemptForbiddenError,
    AttemptNotFoundError,
    AttemptServiceError,
    InvalidInputError,
    StorageError,
)
from attempt_service.models import get_db
from attempt_service.schemas.attempts import (
    ActiveAttemptResponse,
    AttemptCreatedResponse,
    AttemptsUpdatedResponse,
    TestAttemptResponse,
)
from attempt_service.services import AttemptLifecycleManager, AttemptStore
from attempt_service.services.attempt_lifecycle import TRANSITION_OPERATION

logger = logging.getLogger(__name__)

router = APIRouter()


def get_attempt_manager(db: AsyncSession = Depends(get_db)) -> AttemptLifecycleManager:
    """Build a lifecycle manager bound to the request's database session."""
    return AttemptLifecycleManager(
        AttemptStore(db),
        enforce_single_active=settings.ENFORCE_SINGLE_ACTIVE_ATTEMPT,
        enforce_ownership=settings.ENFORCE_ATTEMPT_OWNERSHIP,
    )


def raise_for_domain_error(error: AttemptServiceError) -> NoReturn:
    """
    Translate a lifecycle error into the matching HTTP error.

    Raises:
        HTTPException: Always
    """
    if isinstance(error, InvalidInputError):
        raise_bad_request(
            ErrorMessages.required_integer_fields(error.fields or ["body"])
        )
    if isinstance(error, AttemptForbiddenError):
        raise_forbidden(ErrorMessages.ATTEMPT_ACCESS_DENIED)
    if isinstance(error, AttemptConflictError):
        raise_conflict(ErrorMessages.active_attempt_exists(error.active_attempt_id))
    if isinstance(error, AttemptNotFoundError):
        if error.operation == TRANSITION_OPERATION:
            raise_not_found(ErrorMessages.NO_ATTEMPT_TO_UPDATE)
        raise_not_found(ErrorMessages.ACTIVE_ATTEMPT_NOT_FOUND)
    if isinstance(error, StorageError):
        error_id = str(uuid.uuid4())
        logger.error(
            f"Storage failure during {error.operation_name} (error_id={error_id})",
            extra={"operation": error.operation_name, "error_id": error_id},
        )
        raise_server_error(
            ErrorMessages.database_operation_failed(error.operation_name),
            error_id=error_id,
        )
    raise error


@router.post(
    "/create",
    response_model=AttemptCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_attempt(
    payload: Any = Body(None),
    principal: Principal = Depends(get_current_principal),
    manager: AttemptLifecycleManager = Depends(get_attempt_manager),
):
    """
    Record the start of a test attempt.

    Args:
        payload: JSON body with user_id, test_id and status
        principal: Authenticated caller
        manager: Attempt lifecycle manager

    Returns:
        The created attempt

    Raises:
        HTTPException: 400 on invalid fields, 409 if the user already has an
            active attempt and the single-active guard is enabled
    """
    try:
        attempt = await manager.create(payload, principal)
    except AttemptServiceError as e:
        raise_for_domain_error(e)

    return AttemptCreatedResponse(
        message="Test attempt created",
        test=TestAttemptResponse.model_validate(attempt),
    )


@router.put("/update", response_model=AttemptsUpdatedResponse)
async def update_attempts(
    payload: Any = Body(None),
    principal: Principal = Depends(get_current_principal),
    manager: AttemptLifecycleManager = Depends(get_attempt_manager),
):
    """
    Move the user's attempts from old_status to status and record the score.

    Responds 404 when no attempt still has old_status, which is also what a
    caller acting on stale state sees after another caller's transition won.
    """
    try:
        updated = await manager.transition(payload, principal)
    except AttemptServiceError as e:
        raise_for_domain_error(e)

    return AttemptsUpdatedResponse(
        message="Test attempts updated",
        updated=[TestAttemptResponse.model_validate(a) for a in updated],
    )


@router.post("/all", response_model=List[TestAttemptResponse])
async def list_attempts(
    payload: Any = Body(None),
    principal: Principal = Depends(get_current_principal),
    manager: AttemptLifecycleManager = Depends(get_attempt_manager),
):
    """List all of the user's attempts, most recently started first."""
    try:
        attempts = await manager.list_all(payload, principal)
    except AttemptServiceError as e:
        raise_for_domain_error(e)

    return [TestAttemptResponse.model_validate(a) for a in attempts]


@router.post("/get", response_model=ActiveAttemptResponse)
async def get_active_attempt(
    payload: Any = Body(None),
    principal: Principal = Depends(get_current_principal),
    manager: AttemptLifecycleManager = Depends(get_attempt_manager),
):
    """Get the user's active attempt."""
    try:
        attempt = await manager.get_active(payload, principal)
    except AttemptServiceError as e:
        raise_for_domain_error(e)

    return ActiveAttemptResponse.model_validate(attempt)
