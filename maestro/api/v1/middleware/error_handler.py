"""Maps orchestrator errors that escape an endpoint onto HTTP responses.

Per-task problems never reach this layer; they are already recorded as
failed task results.  What does arrive are the run-fatal conditions (missing
manifest, unusable output directory) and collaborator failures raised
outside a run.
"""

from __future__ import annotations

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from maestro.api.v1.schemas.common import ErrorResponse
from maestro.utils.exceptions import (
    GitError,
    HandlerNotFoundError,
    LLMError,
    MaestroError,
    ManifestNotFoundError,
    OutputDirectoryUnavailableError,
)
from maestro.utils.logging import get_logger

logger = get_logger(__name__)

ERROR_STATUS: dict[type[MaestroError], int] = {
    ManifestNotFoundError: 404,
    HandlerNotFoundError: 404,
    OutputDirectoryUnavailableError: 500,
    LLMError: 502,
    GitError: 502,
}


def status_for(exc: MaestroError) -> int:
    """HTTP status for *exc*, looked up along its class hierarchy."""
    for cls in type(exc).__mro__:
        if cls in ERROR_STATUS:
            return ERROR_STATUS[cls]
    return 500


def _error_body(error: str, detail: str) -> dict:
    return ErrorResponse(error=error, detail=detail).model_dump()


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await call_next(request)
        except MaestroError as exc:
            status_code = status_for(exc)
            logger.warning(
                "request_error",
                error_type=type(exc).__name__,
                status_code=status_code,
                detail=str(exc),
                path=request.url.path,
            )
            return JSONResponse(status_code=status_code, content=_error_body(type(exc).__name__, str(exc)))
        except Exception as exc:
            logger.exception("request_unhandled_error", error_type=type(exc).__name__, path=request.url.path)
            return JSONResponse(
                status_code=500,
                content=_error_body("InternalServerError", "Unexpected server error; see the service log."),
            )
