"""
Storefront Backend: Error Kinds and Exception Hierarchy
=========================================================

What:  Defines the abstract error kinds, their wire representation, and the
       application exceptions that carry them.
How:   Each exception class is tagged with an `ErrorCode`. Global exception
       handlers (registered in main.py) look the code up in `ERROR_REGISTRY`
       and render the uniform `{code, message, data}` envelope.
Who:   Raised by validators, repositories' callers (services) and routes.

Exception Hierarchy:
    StorefrontError (base)          → ErrorCode.INTERNAL
    ├── ValidationError             → ErrorCode.BAD_REQUEST   (400)
    ├── NotFoundError               → ErrorCode.NOT_FOUND     (404)
    └── DatabaseError               → ErrorCode.INTERNAL      (500)

Design Decision:
    Exceptions propagate through the call stack on their own, so callers only
    handle the kinds they care about. The `code` attribute makes the kind
    explicit, and `ERROR_REGISTRY` covers every member of `ErrorCode`.
"""

from enum import Enum
from typing import Any, Dict, NamedTuple, Optional


class ErrorCode(str, Enum):
    """Abstract result kinds understood by the response envelope."""

    SUCCESS = "success"
    BAD_REQUEST = "bad_request"
    NOT_FOUND = "not_found"
    INTERNAL = "internal"


class ErrorSpec(NamedTuple):
    code: str
    message: str
    http_status: int


# Wire code, default human message and HTTP status for every ErrorCode
ERROR_REGISTRY: Dict[ErrorCode, ErrorSpec] = {
    ErrorCode.SUCCESS: ErrorSpec("0000", "Success", 200),
    ErrorCode.BAD_REQUEST: ErrorSpec("4000", "Bad Request", 400),
    ErrorCode.NOT_FOUND: ErrorSpec("4004", "Not Found", 404),
    ErrorCode.INTERNAL: ErrorSpec("5000", "Internal Server Error", 500),
}


def get_error_spec(code: ErrorCode) -> ErrorSpec:
    """Registry lookup; unknown codes fall back to INTERNAL."""
    return ERROR_REGISTRY.get(code, ERROR_REGISTRY[ErrorCode.INTERNAL])


class StorefrontError(Exception):
    """
    Base exception for all Storefront application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
        code:     ErrorCode kind used to pick the wire code and HTTP status
    """

    code: ErrorCode = ErrorCode.INTERNAL

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(StorefrontError):
    """
    Raised when client input fails validation.

    Validators stop at the first violated rule, so `field` names exactly one
    offending field (or None for malformed bodies/query strings).
    HTTP: 400 Bad Request
    """

    code = ErrorCode.BAD_REQUEST

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(StorefrontError):
    """
    Raised when a referenced store or product does not exist.

    The message is the short "<resource> not found" form returned to clients,
    e.g. "store not found".
    HTTP: 404 Not Found
    """

    code = ErrorCode.NOT_FOUND

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource} not found", context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class DatabaseError(StorefrontError):
    """
    Raised when a storage operation fails.

    The message returned to the client is always generic. The driver's error
    text goes into `context["original_error"]` and is only logged server-side.
    HTTP: 500 Internal Server Error
    """

    code = ErrorCode.INTERNAL

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)

    @classmethod
    def from_exception(cls, message: str, exc: BaseException, **context: Any) -> "DatabaseError":
        """Wrap a driver/ORM exception, keeping its text for the server log only."""
        context["original_error"] = f"{type(exc).__name__}: {exc}"
        return cls(message=message, context=context)
