"""Create products, batches, dispatch_records, packing_lists and sequence_counters tables.

Revision ID: 001
Revises:
Create Date: 2024-06-01

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create catalog tables."""
    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("mfg_date", sa.Date(), nullable=False),
        sa.Column("exp_date", sa.Date(), nullable=False),
        sa.Column("quantity_per_box", sa.String(length=50), nullable=False),
        sa.Column("gross_weight", sa.Float(), nullable=False),
        sa.Column("net_weight", sa.Float(), nullable=False),
        sa.Column("shipping_marks", sa.String(length=500), nullable=False, server_default=""),
        sa.Column("shipper_size", sa.String(length=100), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_products_name", "products", ["name"])

    op.create_table(
        "batches",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=True),
        sa.Column("batch_no", sa.String(length=50), nullable=False),
        sa.Column("box_from", sa.Integer(), nullable=False),
        sa.Column("box_to", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_batches_product_id", "batches", ["product_id"])
    op.create_index("ix_batches_batch_no", "batches", ["batch_no"])

    op.create_table(
        "dispatch_records",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("batch_id", sa.Integer(), nullable=True),
        sa.Column("packing_list_no", sa.String(length=50), nullable=False),
        sa.Column("box_from", sa.Integer(), nullable=False),
        sa.Column("box_to", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["batch_id"], ["batches.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_dispatch_records_batch_id", "dispatch_records", ["batch_id"])
    op.create_index(
        "ix_dispatch_records_packing_list_no", "dispatch_records", ["packing_list_no"]
    )

    op.create_table(
        "packing_lists",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("pl_no", sa.String(length=50), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=True),
        sa.Column("pl_date", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_packing_lists_pl_no", "packing_lists", ["pl_no"], unique=True)
    op.create_index("ix_packing_lists_product_id", "packing_lists", ["product_id"])

    op.create_table(
        "sequence_counters",
        sa.Column("scope_key", sa.String(length=20), nullable=False),
        sa.Column("value", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("scope_key"),
    )


def downgrade() -> None:
    """Drop catalog tables."""
    op.drop_table("sequence_counters")

    op.drop_index("ix_packing_lists_product_id", table_name="packing_lists")
    op.drop_index("ix_packing_lists_pl_no", table_name="packing_lists")
    op.drop_table("packing_lists")

    op.drop_index("ix_dispatch_records_packing_list_no", table_name="dispatch_records")
    op.drop_index("ix_dispatch_records_batch_id", table_name="dispatch_records")
    op.drop_table("dispatch_records")

    op.drop_index("ix_batches_batch_no", table_name="batches")
    op.drop_index("ix_batches_product_id", table_name="batches")
    op.drop_table("batches")

    op.drop_index("ix_products_name", table_name="products")
    op.drop_table("products")
