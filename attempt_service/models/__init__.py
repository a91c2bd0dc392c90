"""
Models package for the attempt service.
"""
from .base import Base, async_engine, AsyncSessionLocal, get_db
from .models import ACTIVE_ATTEMPT_STATUS, TestAttempt

__all__ = [
    "Base",
    "async_engine",
    "AsyncSessionLocal",
    "get_db",
    "ACTIVE_ATTEMPT_STATUS",
    "TestAttempt",
]
