"""
Persistent store for test attempts.

Every method runs exactly one statement against the session and, for
writes, commits it. SQLAlchemy failures are rolled back and re-raised as
StorageError (see handle_storage_error); they are never retried here.
"""
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from attempt_service.core.db_error_handling import handle_storage_error
from attempt_service.models import TestAttempt

logger = logging.getLogger(__name__)


class AttemptStore:
    """Storage collaborator for the attempt lifecycle."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def insert_attempt(
        self,
        user_id: int,
        test_id: int,
        status: int,
        started_at: datetime,
    ) -> TestAttempt:
        """
        Insert a new attempt with no score and no completion time.

        Args:
            user_id: Owner of the attempt
            test_id: Opaque test identifier
            status: Initial status code
            started_at: Creation timestamp

        Returns:
            The stored attempt, including its generated id
        """
        attempt = TestAttempt(
            user_id=user_id,
            test_id=test_id,
            status=status,
            started_at=started_at,
        )
        async with handle_storage_error(self.db, "create test attempt"):
            self.db.add(attempt)
            await self.db.commit()
        return attempt

    async def update_status_where(
        self,
        user_id: int,
        old_status: int,
        new_status: int,
        score: int,
        completed_at: datetime,
    ) -> List[TestAttempt]:
        """
        Move every attempt of the user currently at old_status to new_status.

        Runs as a single conditional UPDATE ... RETURNING, so two callers
        racing on the same (user_id, old_status) are serialized by the
        database and only the first one matches any rows.

        Returns:
            The updated attempts (possibly empty)
        """
        stmt = (
            update(TestAttempt)
            .where(
                TestAttempt.user_id == user_id,
                TestAttempt.status == old_status,
            )
            .values(status=new_status, score=score, completed_at=completed_at)
            .returning(TestAttempt)
        )
        async with handle_storage_error(self.db, "update test attempts"):
            result = await self.db.scalars(stmt)
            updated = list(result.all())
            await self.db.commit()
        return updated

    async def list_for_user(self, user_id: int) -> List[TestAttempt]:
        """Return all attempts for the user, most recently started first."""
        stmt = (
            select(TestAttempt)
            .where(TestAttempt.user_id == user_id)
            .order_by(TestAttempt.started_at.desc(), TestAttempt.id.desc())
        )
        async with handle_storage_error(self.db, "list test attempts"):
            result = await self.db.scalars(stmt)
            return list(result.all())

    async def latest_with_status(
        self, user_id: int, status: int
    ) -> Optional[TestAttempt]:
        """Return the most recently started attempt with the given status."""
        stmt = (
            select(TestAttempt)
            .where(
                TestAttempt.user_id == user_id,
                TestAttempt.status == status,
            )
            .order_by(TestAttempt.started_at.desc(), TestAttempt.id.desc())
            .limit(1)
        )
        async with handle_storage_error(self.db, "fetch test attempt"):
            result = await self.db.scalars(stmt)
            return result.first()
