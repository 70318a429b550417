"""
Storefront Backend: Request Logging Middleware
================================================

One access-log line per request on the `storefront.access` logger:

    GET /store/{store_id}/products?page=2 200 4.1ms [3f2a9c1e] from 10.0.0.7

The matched route template is logged instead of the concrete path, so store
and product ids do not multiply distinct log messages; the concrete path is
still attached as `extra["path"]`. 5xx logs at ERROR, 4xx at WARNING.
Bodies are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from storefront.middleware.request_id import request_id_var

logger = logging.getLogger("storefront.access")

# Probed every few seconds by load balancers
SKIPPED_PATHS = frozenset({"/health"})


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


def _route_template(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access logging with request ID correlation."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in SKIPPED_PATHS:
            return await call_next(request)

        began = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - began) * 1000

        template = _route_template(request)
        if request.url.query:
            template = f"{template}?{request.url.query}"
        client = request.client.host if request.client else "unknown"
        rid = request_id_var.get("")

        logger.log(
            _level_for(response.status_code),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            template,
            response.status_code,
            elapsed_ms,
            rid,
            client,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": request.url.path,
                "status": response.status_code,
                "duration_ms": round(elapsed_ms, 2),
                "client_ip": client,
            },
        )
        return response
