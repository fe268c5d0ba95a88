"""Access log: one structlog event per request, tagged with a request id.

The id is taken from ``X-Request-ID`` when the caller sends one and
generated otherwise; it is echoed back on the response so a client can
match a run request against the server log.
"""

from __future__ import annotations

import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from maestro.utils.logging import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        log = logger.bind(request_id=request_id, method=request.method, path=request.url.path)
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            log.error("request_aborted", elapsed_ms=_elapsed_ms(started))
            raise

        level = log.info if response.status_code < 400 else log.warning
        level("request_handled", status_code=response.status_code, elapsed_ms=_elapsed_ms(started))
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
