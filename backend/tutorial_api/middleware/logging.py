"""
Tutorial API - Request Logging Middleware
=========================================

What:  One access log line per request: method, route template, status,
       duration and request ID. Logging the template keeps one line shape
       per endpoint regardless of which tutorial id was requested.
How:   Times the downstream call and logs on the `tutorial_api.access` logger
       at a level chosen from the status class (5xx ERROR, 4xx WARNING,
       otherwise INFO). Structured fields are also attached via `extra`.

Request bodies are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from tutorial_api.middleware.request_id import request_id_var

logger = logging.getLogger("tutorial_api.access")

# Probed every few seconds by orchestrators; not worth an access line each time.
QUIET_PATHS = {"/health"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs one line per request, keyed by the matched route template."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        route = route_template(request)
        status = response.status_code
        rid = request_id_var.get("")
        logger.log(
            level_for_status(status),
            "%s %s %d %.1fms [%s]",
            request.method,
            route,
            status,
            elapsed_ms,
            rid,
            extra={
                "request_id": rid,
                "method": request.method,
                "route": route,
                "path": request.url.path,
                "status": status,
                "duration_ms": round(elapsed_ms, 2),
            },
        )
        return response


def route_template(request: Request) -> str:
    """`/tutorials/{tutorial_id}` rather than the concrete id; raw path if unrouted."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO
