"""Access logging middleware: one line per request with id and latency."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from relay.app.logging import get_logger
from relay.app.trace import REQUEST_ID_HEADER, elapsed_ms, resolve_request_id, start_timer

_LOG = get_logger("relay.access")


class AccessLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        start = start_timer()
        response: Response | None = None
        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            status = response.status_code if response is not None else "ERROR"
            _LOG.info(
                "path=%s method=%s status=%s duration_ms=%d request_id=%s",
                request.url.path,
                request.method,
                status,
                elapsed_ms(start),
                request_id,
            )
