"""
Exception handlers that give every error response the same shape::

    {"detail": "...", "code": "ENTRY_NOT_FOUND", "timestamp": "..."}

Domain errors carry their own status and code.  Request validation
failures become 422 ``VALIDATION_ERROR``; anything else is logged with its
traceback and reported as a bare 500.
"""

import logging
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from pravas.core.exceptions import PravasError

logger = logging.getLogger(__name__)


def _envelope(status_code: int, detail: str, code: str, timestamp: str | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": detail,
            "code": code,
            "timestamp": timestamp or datetime.now(UTC).isoformat(),
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the Pravas error handlers on *app*."""

    @app.exception_handler(PravasError)
    async def pravas_error_handler(request: Request, exc: PravasError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.code, exc.detail)
        return _envelope(exc.status_code, exc.detail, exc.code, exc.timestamp)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _envelope(422, str(exc), "VALIDATION_ERROR")

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return _envelope(500, "Internal server error", "INTERNAL_ERROR")
