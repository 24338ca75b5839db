"""Application layer exceptions.

Every failure kind of the session operations has its own class and
``error_code``. Callers (route handlers, middleware) catch the specific
kinds they can recover from; the presentation layer maps ``error_code``
to an HTTP status.

Messages for token and credential failures are generic. The
precise cause (bad signature, expired, replayed, unknown email, ...) is
logged, never returned.
"""


class ApplicationError(Exception):
    """Base application layer exception."""

    def __init__(self, message: str, error_code: str = "APPLICATION_ERROR"):
        """
        Initialize application exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
        """
        self.message = message
        self.error_code = error_code
        super().__init__(self.message)


class ValidationError(ApplicationError):
    """Raised when input violates a policy (e.g. password strength)."""

    def __init__(
        self,
        message: str = "Validation failed",
        errors: list[str] | None = None,
        strength: int | None = None,
    ):
        super().__init__(message, error_code="VALIDATION_ERROR")
        self.errors = errors if errors is not None else [message]
        self.strength = strength


class AuthenticationError(ApplicationError):
    """Raised when login credentials are invalid."""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message, error_code="INVALID_CREDENTIALS")


class RateLimitExceededError(ApplicationError):
    """Raised when an identifier used up its attempts for the current window."""

    def __init__(
        self,
        message: str = "Too many attempts. Please try again later.",
        retry_after: int | None = None,
    ):
        super().__init__(message, error_code="RATE_LIMIT_EXCEEDED")
        self.retry_after = retry_after


class TokenInvalidError(ApplicationError):
    """Raised when a token is malformed, expired, mismatched or replayed."""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message, error_code="INVALID_TOKEN")


class TokenExpiredError(TokenInvalidError):
    """Raised when a token is past its expiry. Reported to clients as invalid."""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class TokenRevokedError(ApplicationError):
    """Raised when an access token was revoked before its natural expiry."""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message, error_code="TOKEN_REVOKED")


class DuplicateError(ApplicationError):
    """Raised when attempting to register an email that already exists."""

    def __init__(self, message: str = "User already exists"):
        super().__init__(message, error_code="USER_ALREADY_EXISTS")


class InfrastructureError(ApplicationError):
    """Raised when the cache or user repository is unreachable or timed out."""

    def __init__(self, message: str = "Service temporarily unavailable"):
        super().__init__(message, error_code="SERVICE_UNAVAILABLE")
