"""
Storefront Backend: Product Route Handlers
============================================

What:  Product listing and CRUD.
    GET    /product            paginated listing across all stores
    POST   /product            create
    GET    /product/{slug}     fetch by slug
    GET    /product/id/{id}    fetch by id
    PUT    /product/{id}       update (slug unchanged)
    DELETE /product/{id}       delete

Example listing:
    GET /product?limit=10&page=1&sortBy=price&sortDirection=ASC
    → {"code": "0000", "message": "Success",
       "data": {"limit": 10, "page": 1, "nextPage": 0,
                "totalData": 3, "totalPages": 1, "data": [...]}}
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from storefront.deps import get_product_service, get_search_filter
from storefront.pagination import Pagination
from storefront.responses import ApiResponse, success_response
from storefront.schemas.product import ProductRequest, SearchAndFilterProduct
from storefront.services.product_service import ProductService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/product", tags=["Products"])

_ERROR_RESPONSES = {
    400: {"description": "Invalid input", "model": ApiResponse},
    404: {"description": "Product or store not found", "model": ApiResponse},
    500: {"description": "Server error", "model": ApiResponse},
}


@router.get(
    "",
    responses=_ERROR_RESPONSES,
    summary="List products with pagination",
    description=(
        "Products across all stores, each with its store embedded. Products "
        "whose store cannot be loaded are left out of `data` but still counted "
        "in `totalData`."
    ),
)
async def list_products(
    search: SearchAndFilterProduct = Depends(get_search_filter),
    products: ProductService = Depends(get_product_service),
) -> JSONResponse:
    pagination = Pagination.new(search.limit, search.page)
    result = await products.list_products(pagination, search)
    return success_response(result)


@router.post(
    "",
    responses=_ERROR_RESPONSES,
    summary="Create a product",
    description="The slug is derived from the name plus the current Unix time.",
)
async def create_product(
    body: ProductRequest,
    products: ProductService = Depends(get_product_service),
) -> JSONResponse:
    body.validate_request()
    product = await products.create_product(body)
    return success_response(product)


@router.get(
    "/id/{product_id}",
    responses=_ERROR_RESPONSES,
    summary="Get a product by ID",
)
async def get_product(
    product_id: str,
    products: ProductService = Depends(get_product_service),
) -> JSONResponse:
    product = await products.get_product(product_id)
    return success_response(product)


@router.get(
    "/{slug}",
    responses=_ERROR_RESPONSES,
    summary="Get a product by slug",
)
async def get_product_by_slug(
    slug: str,
    products: ProductService = Depends(get_product_service),
) -> JSONResponse:
    product = await products.get_product_by_slug(slug)
    return success_response(product)


@router.put(
    "/{product_id}",
    responses=_ERROR_RESPONSES,
    summary="Update a product",
)
async def update_product(
    product_id: str,
    body: ProductRequest,
    products: ProductService = Depends(get_product_service),
) -> JSONResponse:
    body.validate_request()
    await products.update_product(body, product_id)
    return success_response()


@router.delete(
    "/{product_id}",
    responses=_ERROR_RESPONSES,
    summary="Delete a product",
)
async def delete_product(
    product_id: str,
    products: ProductService = Depends(get_product_service),
) -> JSONResponse:
    await products.delete_product(product_id)
    return success_response()
