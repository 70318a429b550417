"""
Storefront Backend: Store Service
===================================

What:  Business logic for stores: create, fetch, update.
How:   Receives a StoreRepository at construction; translates "no row" into
       NotFoundError and SQLAlchemy failures into DatabaseError.
Who:   Called by the /store route handlers. ProductService uses the same
       repository for its store existence checks.

Requests reaching this service have already passed
`StoreRequest.validate_request()`, so `request.slug` is populated.
"""

import logging
from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy.exc import SQLAlchemyError

from storefront.exceptions import DatabaseError, NotFoundError
from storefront.models.store import Store
from storefront.repositories.store_repository import StoreRepository
from storefront.schemas.store import StoreRequest, StoreResponse

logger = logging.getLogger(__name__)


class StoreService:
    """
    Business logic layer for store operations.

    Stores are never deleted, so there is no delete operation.
    """

    def __init__(self, stores: StoreRepository):
        self._stores = stores

    async def create_store(self, request: StoreRequest) -> StoreResponse:
        """
        Persist a new store with a fresh id and UTC creation time.

        Raises:
            DatabaseError: Insert failed (→ 500)
        """
        store = Store(
            id=str(uuid4()),
            name=request.name,
            slug=request.slug,
            address=request.address,
            phone=request.phone,
            operational_time_start=request.operational_time_start,
            operational_time_end=request.operational_time_end,
            created_at=datetime.now(timezone.utc),
        )
        try:
            await self._stores.create_store(store)
        except SQLAlchemyError as e:
            logger.error("Database error creating store '%s': %s", request.name, str(e))
            raise DatabaseError.from_exception("Could not create the store. Please try again.", e)

        logger.info("Store created: %s (slug=%s)", store.id, store.slug)
        return StoreResponse.model_validate(store)

    async def get_store(self, store_id: str) -> StoreResponse:
        """
        Raises:
            NotFoundError: No store with this id (→ 404)
            DatabaseError: Query failed (→ 500)
        """
        store = await self.require_store(store_id)
        return StoreResponse.model_validate(store)

    async def update_store(self, request: StoreRequest, store_id: str) -> None:
        """
        Overwrite a store's fields in place, recomputing its slug from the new name.

        Raises:
            NotFoundError: No store with this id; nothing is written (→ 404)
            DatabaseError: Query failed (→ 500)
        """
        await self.require_store(store_id)
        try:
            await self._stores.update_store(
                store_id,
                {
                    "name": request.name,
                    "slug": request.slug,
                    "address": request.address,
                    "phone": request.phone,
                    "operational_time_start": request.operational_time_start,
                    "operational_time_end": request.operational_time_end,
                },
            )
        except SQLAlchemyError as e:
            logger.error("Database error updating store %s: %s", store_id, str(e))
            raise DatabaseError.from_exception(
                "Could not update the store. Please try again.", e, store_id=store_id
            )
        logger.info("Store updated: %s", store_id)

    async def require_store(self, store_id: str) -> Store:
        """Load a store row or raise NotFoundError."""
        try:
            store = await self._stores.get_store_by_id(store_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching store %s: %s", store_id, str(e))
            raise DatabaseError.from_exception(
                "Could not retrieve the store. Please try again.", e, store_id=store_id
            )
        if store is None:
            raise NotFoundError(resource="store", resource_id=store_id)
        return store
