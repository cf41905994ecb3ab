"""
Conduit Backend — Access Logging Middleware
=============================================

What:  One access line per API request on the `conduit.access` logger.
How:   Times the downstream call; logs method, path, status, duration,
       request id and client IP. Level follows the status class.

Unhandled exceptions are turned into the 500 envelope here, inside the
request-id middleware, so a failing request still gets its access line and
its X-Request-ID header.

Never logged: request bodies (passwords) and the Authorization header (tokens).
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from conduit.middleware.request_id import request_id_var

access_logger = logging.getLogger("conduit.access")

# Probed by orchestrators every few seconds
SILENT_PATHS = frozenset({"/health"})

INTERNAL_ERROR = {"errors": {"message": "Internal server error"}}


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            access_logger.error(
                "[%s] Unexpected error: %s",
                request_id_var.get(""),
                str(exc),
                exc_info=True,
            )
            response = JSONResponse(status_code=500, content=INTERNAL_ERROR)

        if request.url.path in SILENT_PATHS and response.status_code < 500:
            return response

        elapsed_ms = (time.perf_counter() - started) * 1000
        # The route template groups /articles/<slug> lines together in aggregators
        route = request.scope.get("route")
        access_logger.log(
            level_for_status(response.status_code),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request_id_var.get(""),
            request.client.host if request.client else "unknown",
            extra={"route": getattr(route, "path", None)},
        )
        return response
