"""
Wine Catalog Backend — Request ID Middleware
==============================================

What:  Gives every request a short correlation id and returns it as X-Request-ID.
How:   Uses the client's X-Request-ID when present, otherwise a fresh UUID
       prefix. The id lives in a ContextVar so log records and error
       responses can pick it up without access to the request object.
"""

import logging
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDLogFilter(logging.Filter):
    """Adds `request_id` to every log record ("-" outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "request_id", None):
            record.request_id = request_id_var.get("") or "-"
        return True


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # Client ids are capped so a header cannot flood the logs
        rid = request.headers.get(REQUEST_ID_HEADER, "")[:64] or uuid.uuid4().hex[:8]

        request_id_var.set(rid)
        request.state.request_id = rid
        response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
