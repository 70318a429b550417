"""
Storefront Backend: Page-Based Pagination
===========================================

What:  Offset/limit computation and page metadata for listing endpoints.
How:   `Pagination.new(limit, page)` computes the offset before the queries run;
       `set_data(items, total)` fills in the page metadata once results are in.

Serialized shape (inside the response envelope's `data`):
    {
        "limit": 10,
        "page": 1,
        "nextPage": 2,        # 0 means "no next page"
        "totalData": 42,
        "totalPages": 5,
        "data": [...]
    }

`totalData` is the count reported by the database for the filter. Listing may
drop rows whose store can no longer be resolved, so `len(data)` can be
smaller than the page size even when `nextPage` is set.
"""

import math
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field

from storefront.exceptions import ValidationError


class Pagination(BaseModel):
    """Page request plus, after `set_data`, the page of results and its metadata."""

    model_config = ConfigDict(populate_by_name=True)

    limit: int
    page: int
    next_page: int = Field(default=0, serialization_alias="nextPage")
    offset: int = Field(default=0, exclude=True)
    total_data: int = Field(default=0, serialization_alias="totalData")
    total_pages: int = Field(default=0, serialization_alias="totalPages")
    data: List[Any] = Field(default_factory=list)

    @classmethod
    def new(cls, limit: int, page: int) -> "Pagination":
        """
        Start a page request.

        Raises:
            ValidationError: limit or page is not positive. A zero limit would
                otherwise turn into a division by zero in `set_data`.
        """
        if limit <= 0:
            raise ValidationError(message="limit must be greater than 0", field="limit")
        if page <= 0:
            raise ValidationError(message="page must be greater than 0", field="page")
        return cls(limit=limit, page=page, offset=(page - 1) * limit)

    def set_data(self, data: List[Any], count: int) -> None:
        """Attach one page of results and derive the page metadata from `count`."""
        self.data = data
        self.total_data = count
        self.total_pages = math.ceil(count / self.limit)
        self.next_page = self.page + 1 if self.total_pages > self.page else 0
