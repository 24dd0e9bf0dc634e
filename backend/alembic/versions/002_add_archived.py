"""Add archived column so completed tasks can be put away without deleting them

Revision ID: 002
Revises: 001
Create Date: 2026-10-05

"""
from typing import Sequence, Union

from alembic import op
from sqlalchemy import text

revision: str = '002'
down_revision: Union[str, None] = '001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    conn = op.get_bind()

    columns = {row[1] for row in conn.execute(text("PRAGMA table_info(tasks)")).fetchall()}

    if "archived" not in columns:
        conn.execute(text("ALTER TABLE tasks ADD COLUMN archived INTEGER DEFAULT 0"))

    # Archived implies completed; repair any rows written before the check existed
    conn.execute(text("UPDATE tasks SET archived = 0 WHERE archived = 1 AND completed = 0"))


def downgrade() -> None:
    pass
