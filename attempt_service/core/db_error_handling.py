"""
Database error handling utilities.

This module centralizes the pattern used by every attempt store write and
read:
1. Rolling back the database session on error
2. Logging the error with context
3. Raising StorageError so callers can tell "server malfunction" apart from
   "nothing matched"

Usage:
    from attempt_service.core.db_error_handling import handle_storage_error

    async with handle_storage_error(db, "create test attempt"):
        result = await db.execute(stmt)
        await db.commit()
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from attempt_service.core.exceptions import StorageError


logger = logging.getLogger(__name__)


@asynccontextmanager
async def handle_storage_error(
    db: AsyncSession,
    operation_name: str,
    *,
    log_level: int = logging.ERROR,
) -> AsyncGenerator[None, None]:
    """Async context manager for handling database errors consistently.

    On a SQLAlchemyError the session is rolled back, the error is logged with
    the operation name, and StorageError is raised from the original error.
    Any other exception propagates unchanged.

    Args:
        db: The async session to roll back on error.
        operation_name: Human-readable name of the operation for error
            messages and logging (e.g., "transition test attempts").
        log_level: Logging level for error messages. Defaults to logging.ERROR.

    Raises:
        StorageError: When the wrapped block raises SQLAlchemyError.
    """
    try:
        yield
    except SQLAlchemyError as e:
        await db.rollback()

        logger.log(
            log_level,
            f"Database error during {operation_name}: {e}",
            exc_info=True,
        )

        raise StorageError(operation_name, e) from e
