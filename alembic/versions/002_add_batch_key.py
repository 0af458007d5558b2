"""Add normalized batch_key column to batches.

Revision ID: 002
Revises: 001
Create Date: 2024-07-01

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Add batch_key and fill it from batch_no."""
    op.add_column(
        "batches",
        sa.Column("batch_key", sa.String(length=50), nullable=False, server_default=""),
    )

    # Lower-cased in Python: SQLite's lower() leaves non-ASCII letters alone.
    bind = op.get_bind()
    batches = sa.table(
        "batches",
        sa.column("id", sa.Integer()),
        sa.column("batch_no", sa.String()),
        sa.column("batch_key", sa.String()),
    )
    for batch_id, batch_no in bind.execute(sa.select(batches.c.id, batches.c.batch_no)).all():
        bind.execute(
            batches.update()
            .where(batches.c.id == batch_id)
            .values(batch_key=batch_no.strip().lower())
        )

    op.create_index("ix_batches_batch_key", "batches", ["batch_key"])


def downgrade() -> None:
    """Drop batch_key."""
    op.drop_index("ix_batches_batch_key", table_name="batches")
    op.drop_column("batches", "batch_key")
