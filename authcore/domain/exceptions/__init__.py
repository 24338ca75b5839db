"""Domain exceptions - entity invariant violations."""

from authcore.domain.exceptions.domain_exceptions import (
    DomainException,
    InvalidEntityStateException,
)

__all__ = [
    "DomainException",
    "InvalidEntityStateException",
]
