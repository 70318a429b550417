"""
Storefront Backend: Store SQLAlchemy Model
============================================

What:  ORM model representing the `stores` table.
Who:   Used by StoreRepository for CRUD operations and by Alembic.

Table Design:
    - id: Opaque string (UUID4 text generated by the service). Path segments
      are compared as plain strings, so an unknown id is simply "not found"
      instead of a driver-level cast error.
    - slug: Derived from the name, NOT unique (two stores may share a name).
    - operational_time_start / operational_time_end: Hours 0-23. Their
      relative order is not checked.
    - updated_at: NULL until the first update.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import TIMESTAMP, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from storefront.database import Base


class Store(Base):
    """
    A physical store that owns products.

    Lifecycle:
        1. Created via POST /store
        2. Mutated in place via PUT /store/{id}
        3. Never deleted by this service
    """

    __tablename__ = "stores"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    slug: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="URL-safe form of the name (not unique)",
    )

    address: Mapped[str] = mapped_column(String(512), nullable=False)

    phone: Mapped[str] = mapped_column(String(64), nullable=False)

    operational_time_start: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Opening hour, 0-23",
    )

    operational_time_end: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Closing hour, 0-23",
    )

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

    def __repr__(self) -> str:
        return f"<Store(id={self.id}, slug='{self.slug}')>"
