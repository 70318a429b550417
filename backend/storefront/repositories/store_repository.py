"""
Storefront Backend: Store Repository
======================================

Query plan:
    get_store_by_id: SELECT ... FROM stores WHERE id = $1 (primary key lookup)
    update_store:    UPDATE stores SET ..., updated_at = now WHERE id = $1
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront.models.store import Store

logger = logging.getLogger(__name__)


class StoreRepository:
    """Persistence for the stores table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def create_store(self, store: Store) -> Store:
        async with self._session_factory() as session:
            async with session.begin():
                session.add(store)
        logger.debug("Inserted store %s", store.id)
        return store

    async def get_store_by_id(self, store_id: str) -> Optional[Store]:
        """Returns None when no store has this id."""
        async with self._session_factory() as session:
            return await session.get(Store, store_id)

    async def update_store(self, store_id: str, values: Dict[str, Any]) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                await session.execute(
                    update(Store)
                    .where(Store.id == store_id)
                    .values(**values, updated_at=datetime.now(timezone.utc))
                )
        logger.debug("Updated store %s", store_id)
