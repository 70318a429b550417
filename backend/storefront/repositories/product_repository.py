"""
Storefront Backend: Product Repository
========================================

Query plan:
    count_products:      SELECT count(*) FROM products WHERE 1=1 [AND ...]
    list_products:       SELECT ... FROM products WHERE 1=1 [AND ...]
                         ORDER BY <sort> LIMIT $n OFFSET $m
    get_product_by_id:   primary key lookup
    get_product_by_slug: unique index lookup on products.slug
    update_product:      UPDATE products SET ... WHERE id = $1
    delete_product:      DELETE FROM products WHERE id = $1

count_products and list_products accept the same SearchFilterPagination and
each opens its own session, so the service can run them concurrently.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import Select, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront.models.product import Product
from storefront.repositories.query_builder import SearchFilterPagination, render_query

logger = logging.getLogger(__name__)


class ProductRepository:
    """Persistence for the products table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    def _log_query(self, stmt: Select) -> None:
        if logger.isEnabledFor(logging.DEBUG):
            sql, params = render_query(stmt)
            logger.debug("Query: %s | params=%s", sql, params)

    async def count_products(
        self,
        sfp: SearchFilterPagination,
        store_id: Optional[str] = None,
    ) -> int:
        """Number of products matching the filter, ignoring limit/offset."""
        stmt = sfp.build_where(
            select(func.count()).select_from(Product),
            use_pagination=False,
            store_id=store_id,
        )
        self._log_query(stmt)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return result.scalar_one()

    async def list_products(
        self,
        sfp: SearchFilterPagination,
        store_id: Optional[str] = None,
    ) -> List[Product]:
        """One page of products matching the filter, in the requested order."""
        stmt = sfp.build_where(
            select(Product),
            use_pagination=sfp.limit != 0,
            store_id=store_id,
        )
        self._log_query(stmt)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def create_product(self, product: Product) -> Product:
        async with self._session_factory() as session:
            async with session.begin():
                session.add(product)
        logger.debug("Inserted product %s", product.id)
        return product

    async def get_product_by_id(self, product_id: str) -> Optional[Product]:
        async with self._session_factory() as session:
            return await session.get(Product, product_id)

    async def get_product_by_slug(self, slug: str) -> Optional[Product]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(Product).where(Product.slug == slug).limit(1)
            )
            return result.scalar_one_or_none()

    async def update_product(self, product_id: str, values: Dict[str, Any]) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                await session.execute(
                    update(Product)
                    .where(Product.id == product_id)
                    .values(**values, updated_at=datetime.now(timezone.utc))
                )
        logger.debug("Updated product %s", product_id)

    async def delete_product(self, product_id: str) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                await session.execute(delete(Product).where(Product.id == product_id))
        logger.debug("Deleted product %s", product_id)
