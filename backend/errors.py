"""
Typed failures raised by the ownership guard, orchestrators and store layer,
plus the FastAPI handlers that turn them into error envelopes.

Every error response has the shape {"success": false, "message": "..."};
validation failures additionally carry an "errors" field-to-message mapping.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError, TimeoutError as PoolTimeoutError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class TrackerError(Exception):
    """Base class for failures that map onto an HTTP error envelope."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(TrackerError):
    status_code = status.HTTP_404_NOT_FOUND


class ForbiddenError(TrackerError):
    status_code = status.HTTP_403_FORBIDDEN


class StoreUnavailableError(TrackerError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


def error_envelope(status_code: int, message: str, errors: Optional[dict] = None) -> JSONResponse:
    content = {"success": False, "message": message}
    if errors is not None:
        content["errors"] = errors
    return JSONResponse(status_code=status_code, content=content)


def _field_errors(exc: RequestValidationError) -> dict:
    """Collapse pydantic errors into {field: first message}."""
    errors = {}
    for error in exc.errors():
        parts = [str(p) for p in error.get("loc", ()) if p not in ("body", "query", "path")]
        field_name = ".".join(parts) or "body"
        message = error.get("msg", "Invalid value")
        # pydantic prefixes messages raised from custom validators
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.setdefault(field_name, message)
    return errors


async def tracker_error_handler(request: Request, exc: TrackerError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.message}")
    return error_envelope(exc.status_code, exc.message)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = _field_errors(exc)
    logger.info(f"{request.method} {request.url.path} validation failed: {errors}")
    return error_envelope(422, "Validation failed", errors)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    response = error_envelope(exc.status_code, str(exc.detail))
    if getattr(exc, "headers", None):
        response.headers.update(exc.headers)
    return response


async def store_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} store unavailable: {exc}")
    return error_envelope(status.HTTP_503_SERVICE_UNAVAILABLE, "Data store unavailable, please retry")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TrackerError, tracker_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(OperationalError, store_error_handler)
    app.add_exception_handler(PoolTimeoutError, store_error_handler)
