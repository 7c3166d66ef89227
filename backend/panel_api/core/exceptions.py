"""
Panel error taxonomy and the FastAPI handlers that render it.

Services raise these instead of HTTPException so the same checks can run
outside a request (tests, scripts). Responses keep FastAPI's `detail` key.
"""
import logging
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)


class PanelError(Exception):
    """Base error carrying an HTTP status and optional diagnostic metadata."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        meta: Optional[dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.meta = meta
        super().__init__(message)


class BadRequest(PanelError):
    """Malformed input: collection name, id, JSON parameter, operator key."""

    def __init__(self, message: str, meta: Optional[dict[str, Any]] = None):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, meta)


class Forbidden(PanelError):
    """Admin mode disabled or collection outside the allowlist."""

    def __init__(self, message: str, meta: Optional[dict[str, Any]] = None):
        super().__init__(message, status.HTTP_403_FORBIDDEN, meta)


class NotFound(PanelError):
    """No document matches the id or key."""

    def __init__(self, message: str = "Document not found", meta: Optional[dict[str, Any]] = None):
        super().__init__(message, status.HTTP_404_NOT_FOUND, meta)


class UpstreamFailure(PanelError):
    """The document store is unreachable or rejected the operation."""

    def __init__(self, message: str = "Database operation failed", meta: Optional[dict[str, Any]] = None):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR, meta)


def error_content(error: PanelError) -> dict[str, Any]:
    content: dict[str, Any] = {"detail": error.message}
    if error.meta:
        content["meta"] = error.meta
    return content


async def panel_error_handler(request: Request, exc: PanelError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=error_content(exc))


async def database_error_handler(request: Request, exc: PyMongoError) -> JSONResponse:
    logger.error("Database error on %s %s: %s", request.method, request.url.path, exc)
    error = UpstreamFailure()
    return JSONResponse(status_code=error.status_code, content=error_content(error))


def register_exception_handlers(app: FastAPI) -> None:
    """Install the panel error handlers on the application."""
    app.add_exception_handler(PanelError, panel_error_handler)
    app.add_exception_handler(PyMongoError, database_error_handler)
