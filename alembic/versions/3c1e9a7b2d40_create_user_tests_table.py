"""create user_tests table

Revision ID: 3c1e9a7b2d40
Revises:
Create Date: 2026-10-18 09:12:44.218305

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3c1e9a7b2d40"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create user_tests table with indexes for transitions and history."""
    op.create_table(
        "user_tests",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("test_id", sa.Integer(), nullable=False),
        sa.Column("status", sa.Integer(), nullable=False),
        sa.Column("score", sa.Integer(), nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_user_tests_id", "user_tests", ["id"])
    op.create_index("ix_user_tests_user_id", "user_tests", ["user_id"])
    # Conditional status update and active-attempt lookup
    op.create_index("ix_user_tests_user_status", "user_tests", ["user_id", "status"])
    # Ordered history
    op.create_index(
        "ix_user_tests_user_started", "user_tests", ["user_id", "started_at"]
    )


def downgrade() -> None:
    """Drop user_tests table and all indexes."""
    op.drop_index("ix_user_tests_user_started", table_name="user_tests")
    op.drop_index("ix_user_tests_user_status", table_name="user_tests")
    op.drop_index("ix_user_tests_user_id", table_name="user_tests")
    op.drop_index("ix_user_tests_id", table_name="user_tests")
    op.drop_table("user_tests")
