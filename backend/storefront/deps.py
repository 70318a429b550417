"""
Storefront Backend: FastAPI Dependencies
==========================================

What:  Hands the services built by `create_app()` to route handlers, and turns
       listing query strings into validated request objects.
How:   `create_app()` stores an `ApplicationDependencies` on `app.state`; the
       getters below read it from the current request.
"""

from dataclasses import dataclass

from fastapi import Query, Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from storefront.config import Settings
from storefront.schemas.product import MAX_LIMIT, MAX_PAGE, SearchAndFilterProduct
from storefront.services.product_service import ProductService
from storefront.services.store_service import StoreService


@dataclass
class ApplicationDependencies:
    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    store_service: StoreService
    product_service: ProductService


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    return request.app.state.dependencies


def get_store_service(request: Request) -> StoreService:
    """Get the store service instance."""
    return get_app_dependencies(request).store_service


def get_product_service(request: Request) -> ProductService:
    """Get the product service instance."""
    return get_app_dependencies(request).product_service


def get_search_filter(
    limit: int = Query(
        default=0, le=MAX_LIMIT, description="Items per page; non-positive values mean 10"
    ),
    page: int = Query(
        default=0, le=MAX_PAGE, description="1-based page; non-positive values mean 1"
    ),
    search: str = Query(default="", description="Case-insensitive substring of the product name"),
    sort_by: str = Query(
        default="",
        alias="sortBy",
        description="price, name or created_at (default created_at)",
    ),
    sort_direction: str = Query(
        default="",
        alias="sortDirection",
        description="asc or desc (default desc)",
    ),
) -> SearchAndFilterProduct:
    """
    Listing query parameters, normalized.

    Non-integer or oversized `limit`/`page` values fail FastAPI's own
    parsing and are reported as 400 by the RequestValidationError handler.
    """
    search_filter = SearchAndFilterProduct(
        limit=limit,
        page=page,
        search=search,
        sort_by=sort_by,
        sort_direction=sort_direction,
    )
    search_filter.validate_request()
    return search_filter
