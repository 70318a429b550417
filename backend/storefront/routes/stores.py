"""
Storefront Backend: Store Route Handlers
==========================================

What:  POST /store, GET /store/{id}, PUT /store/{id}, GET /store/{id}/products.
How:   Validate the body, delegate to the services, wrap the result in the
       response envelope. Errors are raised and rendered by the global
       exception handlers registered in main.py.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from storefront.deps import get_product_service, get_search_filter, get_store_service
from storefront.pagination import Pagination
from storefront.responses import ApiResponse, success_response
from storefront.schemas.product import SearchAndFilterProduct
from storefront.schemas.store import StoreRequest
from storefront.services.product_service import ProductService
from storefront.services.store_service import StoreService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/store", tags=["Stores"])

_ERROR_RESPONSES = {
    400: {"description": "Invalid input", "model": ApiResponse},
    404: {"description": "Store not found", "model": ApiResponse},
    500: {"description": "Server error", "model": ApiResponse},
}


@router.post(
    "",
    responses=_ERROR_RESPONSES,
    summary="Create a store",
)
async def create_store(
    body: StoreRequest,
    stores: StoreService = Depends(get_store_service),
) -> JSONResponse:
    """
    Example:
        POST /store
        {"name": "Acme", "address": "1 Main", "phone": "555",
         "operational_time_start": 8, "operational_time_end": 20}
        → 200 {"code": "0000", "message": "Success", "data": {"slug": "acme", ...}}
    """
    body.validate_request()
    store = await stores.create_store(body)
    return success_response(store)


@router.get(
    "/{store_id}",
    responses=_ERROR_RESPONSES,
    summary="Get a store by ID",
)
async def get_store(
    store_id: str,
    stores: StoreService = Depends(get_store_service),
) -> JSONResponse:
    store = await stores.get_store(store_id)
    return success_response(store)


@router.put(
    "/{store_id}",
    responses=_ERROR_RESPONSES,
    summary="Update a store",
    description="Replaces every field of the store. The envelope carries no data.",
)
async def update_store(
    store_id: str,
    body: StoreRequest,
    stores: StoreService = Depends(get_store_service),
) -> JSONResponse:
    body.validate_request()
    await stores.update_store(body, store_id)
    return success_response()


@router.get(
    "/{store_id}/products",
    responses=_ERROR_RESPONSES,
    summary="List a store's products",
    description=(
        "Paginated products of one store. Supports limit, page, search, "
        "sortBy (price, name, created_at) and sortDirection (asc, desc)."
    ),
)
async def list_store_products(
    store_id: str,
    search: SearchAndFilterProduct = Depends(get_search_filter),
    products: ProductService = Depends(get_product_service),
) -> JSONResponse:
    pagination = Pagination.new(search.limit, search.page)
    result = await products.list_store_products(pagination, search, store_id)
    return success_response(result)
