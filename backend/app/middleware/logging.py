"""
Wine Catalog Backend — Access Log Middleware
==============================================

What:  One log line per request: method, path, status, duration, client IP.
How:   Runs inside RequestIDMiddleware, so the request id is already set.
       The level follows the status: 5xx → ERROR, 4xx → WARNING, else INFO.

Example:
    2025-03-02 18:41:07,214 [INFO] wine_catalog.access: POST /add-wine 201 12.4ms [3f9a02c1] from 172.18.0.1

Not logged: request bodies (passwords on /login and /register) and cookies.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import request_id_var

logger = logging.getLogger("wine_catalog.access")

# Polled by probes; logging them would drown the interesting lines
QUIET_PATHS = {"/health"}


def _status_level(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        rid = request_id_var.get("")
        logger.log(
            _status_level(status),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
