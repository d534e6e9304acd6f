"""
Domain exceptions for the Jobly API.

Every error carries the HTTP status it maps to; the handler registered in
main.py renders them as {"detail": message}. Server-side faults (5xx) are
logged with their details but reach the client only as a generic message.
"""

import logging
from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


class JoblyError(Exception):
    """Base exception for all Jobly errors."""

    status_code: int = 500

    def __init__(self, message: str = INTERNAL_ERROR_MESSAGE, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class BadRequestError(JoblyError):
    """Request data is invalid for the operation."""

    status_code = 400


class UnauthorizedError(JoblyError):
    """Missing, invalid or insufficient credentials."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized", details: Optional[dict] = None):
        super().__init__(message, details)


class ForbiddenError(JoblyError):
    """Authenticated user may not perform this change."""

    status_code = 403

    def __init__(self, message: str = "Forbidden", details: Optional[dict] = None):
        super().__init__(message, details)


class NotFoundError(JoblyError):
    """Requested resource does not exist."""

    status_code = 404

    def __init__(self, message: str = "Not found", details: Optional[dict] = None):
        super().__init__(message, details)


class EmptyPayloadError(BadRequestError):
    """A partial update was attempted with no fields."""

    def __init__(self, message: str = "No data", details: Optional[dict] = None):
        super().__init__(message, details)


class InvalidOperatorError(JoblyError):
    """
    A filter field has no whitelisted comparison operator.

    This is a programming error in the caller's operator map, never a user
    error. The offending field is kept on the exception for logs only.
    """

    def __init__(self, field: str):
        super().__init__(INTERNAL_ERROR_MESSAGE, details={"field": field})
        self.field = field


class FilterKeyMismatchError(JoblyError):
    """A strict filter was given a column with no matching value."""

    def __init__(self, field: str):
        super().__init__(INTERNAL_ERROR_MESSAGE, details={"field": field})
        self.field = field


async def jobly_error_handler(request: Request, exc: JoblyError) -> JSONResponse:
    """Render a JoblyError as a JSON response with its status code."""
    if exc.status_code >= 500:
        logger.error(
            f"{type(exc).__name__} on {request.method} {request.url.path}: details={exc.details}"
        )
        detail = INTERNAL_ERROR_MESSAGE
    else:
        detail = exc.message

    return JSONResponse(status_code=exc.status_code, content={"detail": detail})
