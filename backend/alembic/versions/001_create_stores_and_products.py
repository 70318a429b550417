"""Create stores and products tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates `stores` and `products`, with a foreign key from
       products.store_id to stores.id and a unique products.slug.

Rollback: downgrade() drops both tables (destructive, all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create both tables; column docs live in storefront/models/."""
    op.create_table(
        "stores",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column(
            "slug",
            sa.String(255),
            nullable=False,
            comment="URL-safe form of the name (not unique)",
        ),
        sa.Column("address", sa.String(512), nullable=False),
        sa.Column("phone", sa.String(64), nullable=False),
        sa.Column(
            "operational_time_start",
            sa.Integer(),
            nullable=False,
            comment="Opening hour, 0-23",
        ),
        sa.Column(
            "operational_time_end",
            sa.Integer(),
            nullable=False,
            comment="Closing hour, 0-23",
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "products",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("store_id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(300), nullable=False),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["store_id"], ["stores.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug"),
    )

    op.create_index("idx_products_store_id", "products", ["store_id"])
    op.create_index(
        "idx_products_created_at",
        "products",
        [sa.text("created_at DESC")],
    )


def downgrade() -> None:
    """Drop both tables. Products first because of the foreign key."""
    op.drop_index("idx_products_created_at", table_name="products")
    op.drop_index("idx_products_store_id", table_name="products")
    op.drop_table("products")
    op.drop_table("stores")
