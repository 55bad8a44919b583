"""
API error types and the exception handlers that render them.

Every error leaves the service in the same envelope:

    {"error": {"code": "...", "message": "...", "details": {...}}}
"""

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationFailed(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"


class Unauthorized(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"


class NotFound(ApiError):
    """Resource is absent, soft-deleted, or not owned by the caller."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


class Conflict(ApiError):
    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"


class DuplicateTrack(Conflict):
    code = "DUPLICATE_TRACK"


class LimitExceeded(ApiError):
    status_code = 422
    code = "LIMIT_EXCEEDED"


class PlaylistCapacityExceeded(LimitExceeded):
    code = "PLAYLIST_MAX_ITEMS_EXCEEDED"


class ReorderMismatch(ApiError):
    status_code = 422
    code = "MISSING_OR_EXTRA_ITEMS"


def error_response(
    status_code: int, code: str, message: str, details: Optional[Any] = None
) -> JSONResponse:
    """Build a JSON response using the shared error envelope."""
    body = {"code": code, "message": message}
    if details is not None:
        body["details"] = jsonable_encoder(details)
    return JSONResponse(status_code=status_code, content={"error": body})


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    logger.warning(
        f"{request.method} {request.url.path} rejected: {exc.code} ({exc.message})"
    )
    return error_response(exc.status_code, exc.code, exc.message, exc.details)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report schema failures as 400 VALIDATION_ERROR instead of FastAPI's 422."""
    issues = [
        {
            "loc": list(error.get("loc", ())),
            "message": error.get("msg"),
            "type": error.get("type"),
        }
        for error in exc.errors()
    ]
    logger.warning(f"{request.method} {request.url.path} rejected: invalid request")
    return error_response(
        status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR", "Invalid request", issues
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    codes = {
        status.HTTP_401_UNAUTHORIZED: "UNAUTHORIZED",
        status.HTTP_403_FORBIDDEN: "FORBIDDEN",
        status.HTTP_404_NOT_FOUND: "NOT_FOUND",
        status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
    }
    response = error_response(
        exc.status_code, codes.get(exc.status_code, "HTTP_ERROR"), str(exc.detail)
    )
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    # Never retried here: a replay could allocate positions twice
    logger.error(
        f"Store failure during {request.method} {request.url.path}", exc_info=exc
    )
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_SERVER_ERROR",
        "Something went wrong",
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled error during {request.method} {request.url.path}", exc_info=exc
    )
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_SERVER_ERROR",
        "Something went wrong",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all error handlers to the application."""
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
