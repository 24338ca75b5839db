"""Exception handlers for converting exceptions to HTTP responses.

Base exception handlers determine the HTTP status code from the
``error_code`` attribute, so new exceptions only need an entry in
error_codes.py.

To add a new exception:
1. Create the exception class (inheriting from ApplicationError or DomainException)
2. Add its error_code to ERROR_CODE_TO_HTTP_STATUS in error_codes.py
"""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from authcore.application.exceptions import (
    ApplicationError,
    RateLimitExceededError,
    ValidationError,
)
from authcore.domain.exceptions import DomainException
from authcore.presentation.error_codes import get_http_status_for_error_code

logger = logging.getLogger(__name__)


async def application_error_handler(
    request: Request, exc: ApplicationError
) -> JSONResponse:
    """
    Handle ALL application layer exceptions.

    The HTTP status code is determined by the error_code attribute.
    Rate-limit rejections carry a ``Retry-After`` header; policy
    violations list every failed rule under ``errors`` and the
    password's ``strength`` score.
    """
    http_status = get_http_status_for_error_code(exc.error_code)
    content: dict = {
        "detail": exc.message,
        "error_code": exc.error_code,
    }
    headers: dict[str, str] = {}

    if isinstance(exc, ValidationError):
        content["errors"] = [{"field": "body.password", "message": m} for m in exc.errors]
        if exc.strength is not None:
            content["strength"] = exc.strength
    if isinstance(exc, RateLimitExceededError) and exc.retry_after is not None:
        headers["Retry-After"] = str(exc.retry_after)
    if http_status == status.HTTP_401_UNAUTHORIZED:
        headers["WWW-Authenticate"] = "Bearer"
    if http_status >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}")

    return JSONResponse(status_code=http_status, content=content, headers=headers or None)


async def domain_exception_handler(
    request: Request, exc: DomainException
) -> JSONResponse:
    """Handle ALL domain layer exceptions."""
    http_status = get_http_status_for_error_code(exc.error_code)

    return JSONResponse(
        status_code=http_status,
        content={
            "detail": exc.message,
            "error_code": exc.error_code,
        },
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handle Pydantic validation errors from request data.

    Returns a list of all validation errors with field locations and messages,
    in the same shape as password policy violations.
    """
    validation_errors = [
        {
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": "Validation failed",
            "error_code": "VALIDATION_ERROR",
            "errors": validation_errors,
        },
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected errors."""
    logger.error(f"Unhandled error: {exc}", exc_info=True)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "An internal server error occurred",
            "error_code": "INTERNAL_SERVER_ERROR",
        },
    )
