"""
Courseware Backend — Request ID Middleware
============================================

What:  Assigns a correlation id to each incoming request and echoes it back.
How:   Reuses the caller's X-Request-ID header or generates a short UUID,
       stores it in a ContextVar and in request.state, and sets the response header.
Who:   Applied to every request; read by the access logger, the exception
       handlers, and ResourceClient (which forwards it on outgoing calls).
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Behavior:
        1. Use the client's X-Request-ID header if present
        2. Otherwise generate an 8-character id
        3. Store it in request_id_var and request.state.request_id
        4. Add it to the response headers
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]

        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers["X-Request-ID"] = rid
        return response
