"""create product table

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

from shelfsync.adapters.sqlalchemy.mappings import UTCDateTime

revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "product",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("merchant_key", sa.String(length=255), nullable=False),
        sa.Column("external_id", sa.String(length=255), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("image_url", sa.Text(), nullable=False),
        sa.Column("product_condition", sa.String(length=100), nullable=False),
        sa.Column("brand", sa.String(length=255), nullable=False),
        sa.Column("size", sa.String(length=100), nullable=False),
        sa.Column("price", sa.String(length=100), nullable=False),
        sa.Column("inventory_quantity", sa.Integer(), nullable=False),
        sa.Column("created_at", UTCDateTime(), nullable=False),
        sa.Column("updated_at", UTCDateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_product")),
        sa.UniqueConstraint("merchant_key", "external_id", name="uq_product_merchant_external"),
    )
    op.create_index("ix_product_external_id", "product", ["external_id"], unique=False)
    op.create_index("ix_product_merchant_key", "product", ["merchant_key"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_product_merchant_key", table_name="product")
    op.drop_index("ix_product_external_id", table_name="product")
    op.drop_table("product")
