"""Domain layer exceptions for broken entity invariants."""


class DomainException(Exception):
    """
    Base exception for domain layer.

    Raised when a domain object cannot exist in the requested state,
    e.g. a credential without a password hash or with a malformed email.
    """

    def __init__(self, message: str, error_code: str = "DOMAIN_ERROR"):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
        """
        self.message = message
        self.error_code = error_code
        super().__init__(self.message)


class InvalidEntityStateException(DomainException):
    """Raised when an entity is in an invalid state."""

    def __init__(self, message: str):
        super().__init__(message, error_code="INVALID_ENTITY_STATE")
