"""backfill threads.first_post_id for legacy rows

Threads written before the body moved into ``posts`` have no
``first_post_id``. Reads still backfill lazily, but running this once
removes the read-time write entirely.

Revision ID: 0002_backfill_first_post_id
Revises: 0001_initial
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0002_backfill_first_post_id'
down_revision: Union[str, None] = '0001_initial'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute(sa.text(
        """
        UPDATE threads
        SET first_post_id = (
            SELECT MIN(posts.id) FROM posts
            WHERE posts.thread_id = threads.id AND posts.is_first = :is_first
        )
        WHERE first_post_id IS NULL
          AND EXISTS (
            SELECT 1 FROM posts
            WHERE posts.thread_id = threads.id AND posts.is_first = :is_first
          )
        """
    ).bindparams(is_first=True))


def downgrade() -> None:
    # data-only migration; the backfilled ids are still correct
    pass
