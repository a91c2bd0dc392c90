"""
Attempt lifecycle: create, transition, list and active-attempt lookup.

The status transition is predicate-guarded: the caller supplies the status it
believes the attempt currently has, and the update only applies to rows that
still have it. A caller acting on stale state therefore matches nothing and
gets AttemptNotFoundError instead of overwriting another caller's result.
"""
import logging
from datetime import datetime
from typing import Any, Callable, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from attempt_service.core.auth import Principal
from attempt_service.core.datetime_utils import utc_now
from attempt_service.core.exceptions import (
    AttemptConflictError,
    AttemptForbiddenError,
    AttemptNotFoundError,
    InvalidInputError,
)
from attempt_service.models import ACTIVE_ATTEMPT_STATUS, TestAttempt
from attempt_service.schemas.attempts import (
    AttemptCreateRequest,
    AttemptLookupRequest,
    AttemptTransitionRequest,
)
from .attempt_store import AttemptStore

logger = logging.getLogger(__name__)

RequestT = TypeVar("RequestT", bound=BaseModel)

TRANSITION_OPERATION = "transition"
GET_ACTIVE_OPERATION = "get active"


def validate_input(schema: Type[RequestT], payload: Any, operation: str) -> RequestT:
    """
    Validate a raw payload against a strict request schema.

    Args:
        schema: Request schema class
        payload: Raw request data (usually the decoded JSON body)
        operation: Operation name for the error message

    Returns:
        The validated request

    Raises:
        InvalidInputError: If a field is missing or not an integer
    """
    if isinstance(payload, schema):
        return payload
    try:
        return schema.model_validate(payload)
    except ValidationError as e:
        raise InvalidInputError(
            operation, e.errors(include_url=False, include_context=False)
        ) from e


class AttemptLifecycleManager:
    """
    Domain operations on test attempts.

    Args:
        store: Storage collaborator
        enforce_single_active: Reject creating an active attempt while the
            user already has one
        enforce_ownership: Reject operations on another user's attempts
        clock: Source of server time for started_at / completed_at
    """

    def __init__(
        self,
        store: AttemptStore,
        *,
        enforce_single_active: bool = False,
        enforce_ownership: bool = False,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.enforce_single_active = enforce_single_active
        self.enforce_ownership = enforce_ownership
        self._clock = clock

    def _check_ownership(self, principal: Optional[Principal], user_id: int) -> None:
        if not self.enforce_ownership or principal is None:
            return
        if str(principal.id) != str(user_id):
            logger.warning(
                f"Principal {principal.id} denied access to attempts of user {user_id}"
            )
            raise AttemptForbiddenError(principal.id, user_id)

    async def create(
        self, payload: Any, principal: Optional[Principal] = None
    ) -> TestAttempt:
        """
        Create a new attempt.

        Args:
            payload: user_id, test_id and status
            principal: Authenticated caller, used by the ownership guard

        Returns:
            The created attempt with its generated id

        Raises:
            InvalidInputError: If a field is missing or not an integer
            AttemptForbiddenError: If the ownership guard rejects the caller
            AttemptConflictError: If the single-active guard finds an active attempt
            StorageError: If the insert fails
        """
        request = validate_input(AttemptCreateRequest, payload, "create")
        self._check_ownership(principal, request.user_id)

        if self.enforce_single_active and request.status == ACTIVE_ATTEMPT_STATUS:
            active = await self.store.latest_with_status(
                request.user_id, ACTIVE_ATTEMPT_STATUS
            )
            if active is not None:
                raise AttemptConflictError(request.user_id, active.id)

        attempt = await self.store.insert_attempt(
            user_id=request.user_id,
            test_id=request.test_id,
            status=request.status,
            started_at=self._clock(),
        )
        logger.info(
            f"Test attempt {attempt.id} created for user {request.user_id} "
            f"(test {request.test_id}, status {request.status})"
        )
        return attempt

    async def transition(
        self, payload: Any, principal: Optional[Principal] = None
    ) -> List[TestAttempt]:
        """
        Move the user's attempts from old_status to new_status and record a score.

        Every attempt that still has old_status is updated; more than one
        match is not an error.

        Args:
            payload: user_id, score, status (new) and old_status
            principal: Authenticated caller, used by the ownership guard

        Returns:
            All updated attempts (at least one)

        Raises:
            InvalidInputError: If a field is missing or not an integer
            AttemptForbiddenError: If the ownership guard rejects the caller
            AttemptNotFoundError: If no attempt currently has old_status
            StorageError: If the update fails
        """
        request = validate_input(
            AttemptTransitionRequest, payload, TRANSITION_OPERATION
        )
        self._check_ownership(principal, request.user_id)

        updated = await self.store.update_status_where(
            user_id=request.user_id,
            old_status=request.old_status,
            new_status=request.new_status,
            score=request.score,
            completed_at=self._clock(),
        )
        if not updated:
            logger.info(
                f"No attempt with status {request.old_status} for user "
                f"{request.user_id}; transition not applied"
            )
            raise AttemptNotFoundError(
                TRANSITION_OPERATION, request.user_id, request.old_status
            )

        if len(updated) > 1:
            logger.warning(
                f"Transition for user {request.user_id} matched {len(updated)} attempts"
            )
        logger.info(
            f"User {request.user_id}: {len(updated)} attempt(s) moved from status "
            f"{request.old_status} to {request.new_status}"
        )
        return updated

    async def list_all(
        self, payload: Any, principal: Optional[Principal] = None
    ) -> List[TestAttempt]:
        """
        Return every attempt of the user, most recently started first.

        Raises:
            InvalidInputError: If user_id is missing or not an integer
            AttemptForbiddenError: If the ownership guard rejects the caller
            StorageError: If the query fails
        """
        request = validate_input(AttemptLookupRequest, payload, "list")
        self._check_ownership(principal, request.user_id)
        return await self.store.list_for_user(request.user_id)

    async def get_active(
        self, payload: Any, principal: Optional[Principal] = None
    ) -> TestAttempt:
        """
        Return the user's most recently started active attempt.

        Ties on started_at are broken by the higher id.

        Raises:
            InvalidInputError: If user_id is missing or not an integer
            AttemptForbiddenError: If the ownership guard rejects the caller
            AttemptNotFoundError: If the user has no active attempt
            StorageError: If the query fails
        """
        request = validate_input(AttemptLookupRequest, payload, GET_ACTIVE_OPERATION)
        self._check_ownership(principal, request.user_id)

        attempt = await self.store.latest_with_status(
            request.user_id, ACTIVE_ATTEMPT_STATUS
        )
        if attempt is None:
            raise AttemptNotFoundError(
                GET_ACTIVE_OPERATION, request.user_id, ACTIVE_ATTEMPT_STATUS
            )
        return attempt
