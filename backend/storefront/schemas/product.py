"""
Storefront Backend: Product Request/Response Schemas
======================================================

What:  Pydantic models for the product endpoints, the product request
       validator, and the listing search/filter normalizer.

Listing query parameters:
    limit          Items per page; non-positive → 10, capped at MAX_LIMIT
    page           1-based page number; non-positive → 1, capped at MAX_PAGE
    search         Case-insensitive substring matched against the name
    sortBy         price | name | created_at (case-insensitive), else created_at
    sortDirection  asc | desc (case-insensitive), else DESC
"""

import math
from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from storefront.exceptions import ValidationError
from storefront.models.product import Product
from storefront.models.store import Store
from storefront.schemas.store import StoreResponse
from storefront.slug import create_slug

DEFAULT_LIMIT = 10
DEFAULT_PAGE = 1

# Upper bounds for client-supplied paging; OFFSET = (page - 1) * limit must fit a
# 64-bit integer in every supported database
MAX_LIMIT = 1000
MAX_PAGE = 2**31 - 1

SORT_BY_FIELDS: Dict[str, str] = {
    "PRICE": "price",
    "NAME": "name",
    "CREATED_AT": "created_at",
}
DEFAULT_SORT_BY = "created_at"

SORT_DIRECTIONS: Dict[str, str] = {
    "ASC": "ASC",
    "DESC": "DESC",
}
DEFAULT_SORT_DIRECTION = "DESC"


class ProductRequest(BaseModel):
    """
    Body of POST /product and PUT /product/{id}.

    `slug` is derived (time-salted) by `validate_request()`. Updates ignore
    it and keep the slug assigned at creation.
    """

    name: str = ""
    price: float = 0
    description: str = ""
    store_id: str = ""
    slug: str = Field(default="", exclude=True)

    def validate_request(self) -> None:
        """
        Check the rules in order and stop at the first failure.

        Raises:
            ValidationError: with a message naming the offending field.
        """
        if not self.name:
            raise ValidationError(message="missing name", field="name")
        if not math.isfinite(self.price) or self.price < 0:
            raise ValidationError(message="missing price", field="price")
        if not self.description:
            raise ValidationError(message="missing description", field="description")
        if not self.store_id:
            raise ValidationError(message="missing store id", field="store_id")

        self.slug = create_slug(self.name, unique=True)


class SearchAndFilterProduct(BaseModel):
    """Listing query parameters. Normalized, never rejected."""

    model_config = ConfigDict(populate_by_name=True)

    limit: int = 0
    page: int = 0
    search: str = ""
    sort_by: str = Field(default="", alias="sortBy")
    sort_direction: str = Field(default="", alias="sortDirection")

    def validate_request(self) -> None:
        self.sort_by = SORT_BY_FIELDS.get(self.sort_by.upper(), DEFAULT_SORT_BY)
        self.sort_direction = SORT_DIRECTIONS.get(
            self.sort_direction.upper(), DEFAULT_SORT_DIRECTION
        )
        if self.limit <= 0:
            self.limit = DEFAULT_LIMIT
        self.limit = min(self.limit, MAX_LIMIT)
        if self.page <= 0:
            self.page = DEFAULT_PAGE
        self.page = min(self.page, MAX_PAGE)


class ProductResponse(BaseModel):
    """Product as returned by the API, with its store embedded."""

    id: str
    name: str
    slug: str
    price: float
    description: str
    created_at: datetime
    updated_at: Optional[datetime] = None
    store: StoreResponse

    @classmethod
    def from_models(cls, product: Product, store: Store) -> "ProductResponse":
        """Join a product row with its (separately loaded) store row."""
        return cls(
            id=product.id,
            name=product.name,
            slug=product.slug,
            price=product.price,
            description=product.description,
            created_at=product.created_at,
            updated_at=product.updated_at,
            store=StoreResponse.model_validate(store),
        )
