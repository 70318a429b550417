"""
Storefront Backend: Product Service (Domain Assembly)
=======================================================

What:  Business logic for products, including the paginated listings that
       join every product with its store.
How:   Composes ProductRepository (product rows) and StoreService (store
       existence checks and lookups). Joins happen in Python, one store
       lookup per product row.
Who:   Called by the /product and /store/{id}/products route handlers.

Listing Flow (GET /product):
    ┌───────────────┐
    │ list page     │──┐
    └───────────────┘  │   ┌──────────┐    ┌──────────────────┐    ┌──────────┐
                       ├──▶│   join   │───▶│ store lookup per │───▶│ paginate │
    ┌───────────────┐  │   │ (barrier)│    │ row (sequential) │    │ metadata │
    │ count matches │──┘   └──────────┘    └──────────────────┘    └──────────┘
    └───────────────┘
      concurrent, one TaskGroup

    - If either read fails, the TaskGroup cancels the other and the whole
      listing fails with DatabaseError. Nothing partial is returned.
    - A row whose store lookup fails or finds nothing is dropped and logged.
      totalData still counts it, so totalData can exceed the rows returned.

Store-scoped Flow (GET /store/{id}/products):
    Store existence check first (404 before any product query), then the same
    two concurrent reads. Every row belongs to that store, so no per-row
    lookup is needed.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple
from uuid import uuid4

from sqlalchemy.exc import SQLAlchemyError

from storefront.exceptions import DatabaseError, NotFoundError
from storefront.models.product import Product
from storefront.models.store import Store
from storefront.pagination import Pagination
from storefront.repositories.product_repository import ProductRepository
from storefront.repositories.query_builder import SearchFilterPagination
from storefront.schemas.product import (
    ProductRequest,
    ProductResponse,
    SearchAndFilterProduct,
)
from storefront.services.store_service import StoreService

logger = logging.getLogger(__name__)


class ProductService:
    """
    Business logic layer for product operations.

    Error Handling Strategy:
        Missing rows become NotFoundError ("product not found" /
        "store not found"). SQLAlchemy failures become DatabaseError with the
        driver text kept in the log context only.
    """

    def __init__(self, products: ProductRepository, stores: StoreService):
        self._products = products
        self._stores = stores

    # ══════════════════════════════════════════════════════════════════════
    # Listing
    # ══════════════════════════════════════════════════════════════════════

    async def list_products(
        self,
        pagination: Pagination,
        search: SearchAndFilterProduct,
    ) -> Pagination:
        """
        One page of products across all stores, each with its store embedded.

        Raises:
            DatabaseError: The page or count query failed (→ 500)
        """
        sfp = _query_spec(pagination, search)
        products, total = await self._fetch_page(sfp)

        items: List[ProductResponse] = []
        for product in products:
            store = await self._resolve_store(product)
            if store is None:
                continue
            items.append(ProductResponse.from_models(product, store))

        pagination.set_data(items, total)
        return pagination

    async def list_store_products(
        self,
        pagination: Pagination,
        search: SearchAndFilterProduct,
        store_id: str,
    ) -> Pagination:
        """
        One page of a single store's products.

        Raises:
            NotFoundError: The store does not exist; no product query runs (→ 404)
            DatabaseError: A query failed (→ 500)
        """
        store = await self._stores.require_store(store_id)

        sfp = _query_spec(pagination, search)
        products, total = await self._fetch_page(sfp, store_id=store_id)

        pagination.set_data(
            [ProductResponse.from_models(product, store) for product in products],
            total,
        )
        return pagination

    async def _fetch_page(
        self,
        sfp: SearchFilterPagination,
        store_id: Optional[str] = None,
    ) -> Tuple[List[Product], int]:
        """Run the page query and the count query concurrently and join them."""
        try:
            async with asyncio.TaskGroup() as tg:
                rows_task = tg.create_task(self._products.list_products(sfp, store_id=store_id))
                count_task = tg.create_task(self._products.count_products(sfp, store_id=store_id))
        except ExceptionGroup as eg:
            cause = eg.exceptions[0]
            logger.error(
                "Listing products failed (store=%s): %s", store_id, str(cause), exc_info=cause
            )
            raise DatabaseError.from_exception(
                "Could not retrieve products. Please try again.", cause, store_id=store_id
            ) from cause

        return rows_task.result(), count_task.result()

    async def _resolve_store(self, product: Product) -> Optional[Store]:
        """Store owning `product`, or None when it cannot be loaded."""
        try:
            return await self._stores.require_store(product.store_id)
        except (NotFoundError, DatabaseError) as e:
            # TODO: decide with the product owner whether orphaned rows should
            # fail the listing instead of being hidden.
            logger.warning(
                "Dropping product %s from listing: store %s unavailable (%s)",
                product.id,
                product.store_id,
                e.message,
            )
            return None

    # ══════════════════════════════════════════════════════════════════════
    # Single-product operations
    # ══════════════════════════════════════════════════════════════════════

    async def create_product(self, request: ProductRequest) -> ProductResponse:
        """
        Persist a new product under an existing store.

        Raises:
            NotFoundError: `request.store_id` does not exist; nothing is written (→ 404)
            DatabaseError: Insert failed, including a slug collision (→ 500)
        """
        store = await self._stores.require_store(request.store_id)

        product = Product(
            id=str(uuid4()),
            store_id=request.store_id,
            name=request.name,
            slug=request.slug,
            price=request.price,
            description=request.description,
            created_at=datetime.now(timezone.utc),
        )
        try:
            await self._products.create_product(product)
        except SQLAlchemyError as e:
            logger.error("Database error creating product '%s': %s", request.name, str(e))
            raise DatabaseError.from_exception(
                "Could not create the product. Please try again.", e, store_id=request.store_id
            )

        logger.info("Product created: %s (slug=%s, store=%s)", product.id, product.slug, store.id)
        return ProductResponse.from_models(product, store)

    async def get_product_by_slug(self, slug: str) -> ProductResponse:
        """
        Raises:
            NotFoundError: No product with this slug, or its store is gone (→ 404)
            DatabaseError: Query failed (→ 500)
        """
        try:
            product = await self._products.get_product_by_slug(slug)
        except SQLAlchemyError as e:
            logger.error("Database error fetching product by slug %s: %s", slug, str(e))
            raise DatabaseError.from_exception(
                "Could not retrieve the product. Please try again.", e, slug=slug
            )
        if product is None:
            raise NotFoundError(resource="product", context={"slug": slug})

        store = await self._stores.require_store(product.store_id)
        return ProductResponse.from_models(product, store)

    async def get_product(self, product_id: str) -> ProductResponse:
        """Same as get_product_by_slug, keyed by id."""
        product = await self._require_product(product_id)
        store = await self._stores.require_store(product.store_id)
        return ProductResponse.from_models(product, store)

    async def update_product(self, request: ProductRequest, product_id: str) -> None:
        """
        Overwrite a product's fields in place. The slug assigned at creation is kept.

        Raises:
            NotFoundError: Product or target store missing; nothing is written (→ 404)
            DatabaseError: Query failed (→ 500)
        """
        product = await self._require_product(product_id)
        await self._stores.require_store(request.store_id)

        try:
            await self._products.update_product(
                product.id,
                {
                    "store_id": request.store_id,
                    "name": request.name,
                    "price": request.price,
                    "description": request.description,
                },
            )
        except SQLAlchemyError as e:
            logger.error("Database error updating product %s: %s", product_id, str(e))
            raise DatabaseError.from_exception(
                "Could not update the product. Please try again.", e, product_id=product_id
            )
        logger.info("Product updated: %s", product_id)

    async def delete_product(self, product_id: str) -> None:
        """
        Raises:
            NotFoundError: Product missing, e.g. already deleted (→ 404)
            DatabaseError: Query failed (→ 500)
        """
        product = await self._require_product(product_id)
        try:
            await self._products.delete_product(product.id)
        except SQLAlchemyError as e:
            logger.error("Database error deleting product %s: %s", product_id, str(e))
            raise DatabaseError.from_exception(
                "Could not delete the product. Please try again.", e, product_id=product_id
            )
        logger.info("Product deleted: %s", product_id)

    async def _require_product(self, product_id: str) -> Product:
        try:
            product = await self._products.get_product_by_id(product_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching product %s: %s", product_id, str(e))
            raise DatabaseError.from_exception(
                "Could not retrieve the product. Please try again.", e, product_id=product_id
            )
        if product is None:
            raise NotFoundError(resource="product", resource_id=product_id)
        return product


def _query_spec(pagination: Pagination, search: SearchAndFilterProduct) -> SearchFilterPagination:
    return SearchFilterPagination(
        limit=pagination.limit,
        offset=pagination.offset,
        search=search.search,
        sort_by=search.sort_by,
        sort_direction=search.sort_direction,
    )
