"""Application layer exceptions."""

from authcore.application.exceptions.exceptions import (
    ApplicationError,
    AuthenticationError,
    DuplicateError,
    InfrastructureError,
    RateLimitExceededError,
    TokenExpiredError,
    TokenInvalidError,
    TokenRevokedError,
    ValidationError,
)

__all__ = [
    "ApplicationError",
    "AuthenticationError",
    "DuplicateError",
    "InfrastructureError",
    "RateLimitExceededError",
    "TokenExpiredError",
    "TokenInvalidError",
    "TokenRevokedError",
    "ValidationError",
]
