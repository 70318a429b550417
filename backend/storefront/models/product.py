"""
Storefront Backend: Product SQLAlchemy Model
==============================================

What:  ORM model representing the `products` table.
Who:   Used by ProductRepository and by Alembic.

Table Design:
    - store_id: Foreign key to stores.id. The services additionally check the
      store exists before writing, so a missing store surfaces as 404.
    - slug: Unique, time-salted at creation ("widget-1700000000"), used for
      GET /product/{slug}. Updates never recompute it.
    - price: NUMERIC(12, 2) returned as float so it serializes as a JSON number.

Indexes:
    - idx_products_store_id: store-scoped listing
    - idx_products_created_at: default sort (created_at DESC)
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import TIMESTAMP, ForeignKey, Index, Numeric, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from storefront.database import Base


class Product(Base):
    """
    A product sold by exactly one store.

    Lifecycle:
        1. Created via POST /product, referencing an existing store
        2. Updated in place via PUT /product/{id} (slug kept)
        3. Deleted permanently via DELETE /product/{id}
    """

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)

    store_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("stores.id"),
        nullable=False,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    slug: Mapped[str] = mapped_column(String(300), nullable=False, unique=True)

    price: Mapped[float] = mapped_column(
        Numeric(12, 2, asdecimal=False),
        nullable=False,
        default=0,
    )

    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[Optional[datetime]] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=True,
        default=None,
    )

    __table_args__ = (
        Index("idx_products_store_id", store_id),
        Index("idx_products_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, slug='{self.slug}', store_id={self.store_id})>"
