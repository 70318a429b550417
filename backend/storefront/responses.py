"""
Storefront Backend: HTTP Response Envelope
============================================

What:  Wraps every API result in the same JSON shape.
Who:   Route handlers (success) and global exception handlers (errors).

Shape:
    {
        "code": "0000",
        "message": "Success",
        "data": {...}          # omitted when there is no payload
    }

The HTTP status travels alongside the envelope (`http_status`) but is never
serialized into the body. Codes, default messages and statuses come from
`ERROR_REGISTRY` in exceptions.py.
"""

from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from storefront.exceptions import ErrorCode, get_error_spec


class ApiResponse(BaseModel):
    """Uniform response body for success and error results."""

    code: str = Field(description="Wire code, '0000' on success")
    message: str = Field(description="Human-readable result message")
    data: Optional[Any] = Field(default=None, description="Payload, omitted when empty")
    http_status: int = Field(default=200, exclude=True)

    def to_response(self) -> JSONResponse:
        content = {"code": self.code, "message": self.message}
        if self.data is not None:
            content["data"] = jsonable_encoder(self.data)
        return JSONResponse(status_code=self.http_status, content=content)


def success_response(data: Any = None) -> JSONResponse:
    """Envelope `data` with the SUCCESS code."""
    spec = get_error_spec(ErrorCode.SUCCESS)
    return ApiResponse(
        code=spec.code,
        message=spec.message,
        data=data,
        http_status=spec.http_status,
    ).to_response()


def error_response(code: ErrorCode, message: str = "") -> JSONResponse:
    """Envelope for an error kind; an empty message falls back to the registry's."""
    spec = get_error_spec(code)
    return ApiResponse(
        code=spec.code,
        message=message or spec.message,
        http_status=spec.http_status,
    ).to_response()
