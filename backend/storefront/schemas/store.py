"""
Storefront Backend: Store Request/Response Schemas
====================================================

What:  Pydantic models for the store endpoints, plus the store request
       validator.
How:   Request fields default to empty values so that a missing field and an
       empty field are reported by the same fail-fast rule ("missing name"),
       instead of Pydantic's aggregated 422 error list.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from storefront.exceptions import ValidationError
from storefront.slug import create_slug

MIN_HOUR = 0
MAX_HOUR = 23


class StoreRequest(BaseModel):
    """
    Body of POST /store and PUT /store/{id}.

    `slug` is derived by `validate_request()`; a client-supplied value is
    always overwritten.
    """

    name: str = ""
    address: str = ""
    phone: str = ""
    operational_time_start: int = 0
    operational_time_end: int = 0
    slug: str = Field(default="", exclude=True)

    def validate_request(self) -> None:
        """
        Check the rules in order and stop at the first failure.

        Raises:
            ValidationError: with a message naming the offending field.
        """
        if not self.name:
            raise ValidationError(message="missing name", field="name")
        if not self.address:
            raise ValidationError(message="missing address", field="address")
        if not self.phone:
            raise ValidationError(message="missing phone", field="phone")
        if not MIN_HOUR <= self.operational_time_start <= MAX_HOUR:
            raise ValidationError(
                message="missing operational time start (0-23)",
                field="operational_time_start",
            )
        if not MIN_HOUR <= self.operational_time_end <= MAX_HOUR:
            raise ValidationError(
                message="missing operational time end (0-23)",
                field="operational_time_end",
            )

        self.slug = create_slug(self.name)


class StoreResponse(BaseModel):
    """Store as returned by the API, standalone or embedded in a product."""

    id: str
    name: str
    slug: str
    address: str
    phone: str
    operational_time_start: int
    operational_time_end: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
