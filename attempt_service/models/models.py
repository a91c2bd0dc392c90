"""
SQLAlchemy models for test attempt tracking.
"""
from sqlalchemy import Column, DateTime, Index, Integer

from attempt_service.core.datetime_utils import utc_now
from .base import Base

# Reserved status code for an in-progress ("active") attempt. All other
# status codes are caller-defined.
ACTIVE_ATTEMPT_STATUS = 1


class TestAttempt(Base):
    """A user's attempt at a timed test."""

    __tablename__ = "user_tests"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    test_id = Column(Integer, nullable=False)  # Opaque reference to test content
    status = Column(Integer, nullable=False)
    score = Column(Integer, nullable=True)  # Set only on transition
    started_at = Column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
    completed_at = Column(DateTime(timezone=True), nullable=True)

    # Indexes for the transition predicate and ordered history
    __table_args__ = (
        Index("ix_user_tests_user_status", "user_id", "status"),
        Index("ix_user_tests_user_started", "user_id", "started_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<TestAttempt id={self.id} user_id={self.user_id} "
            f"test_id={self.test_id} status={self.status}>"
        )
