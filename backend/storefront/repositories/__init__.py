# Repositories package init
"""
Storefront Backend: Data Access Layer
=======================================

What:  Issues parameterized queries against the stores and products tables.
How:   Each repository receives an `async_sessionmaker` and opens its own
       short-lived session per operation. Two reads can therefore run at the
       same time (one AsyncSession cannot execute concurrent statements).

Repository Inventory:
    - query_builder.py:      SearchFilterPagination → WHERE/ORDER BY/LIMIT
    - store_repository.py:   stores CRUD (no delete)
    - product_repository.py: products CRUD, count and list

Repositories return ORM objects (or None for "no such row") and let
SQLAlchemyError propagate. Translating errors into API error kinds is the
services' job.
"""

from storefront.repositories.product_repository import ProductRepository
from storefront.repositories.query_builder import SearchFilterPagination, render_query
from storefront.repositories.store_repository import StoreRepository

__all__ = [
    "ProductRepository",
    "SearchFilterPagination",
    "StoreRepository",
    "render_query",
]
