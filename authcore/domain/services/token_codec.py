"""Token codec interface - domain layer abstraction.

The session core needs two kinds of bearer credentials:

1. Access tokens: short-lived, carry identity and role, checked on every request
2. Refresh tokens: long-lived, exchanged for a new pair, one valid per subject

The domain cares that tokens are signed, time-bounded, bound to one issuer
and audience, and that an access token can never be accepted where a
refresh token is expected (or the other way round). It does not care about
the wire format or signing library.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class TokenKind(str, Enum):
    """Token type, encoded in the ``typ`` claim."""

    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True)
class Claims:
    """
    Verified contents of a token.

    ``role`` is only present on access tokens. ``token_id`` is the unique
    per-token identifier (JWT ``jti``) used as the revocation key.
    """

    subject_id: str
    email: str
    kind: TokenKind
    token_id: str
    issuer: str
    audience: str
    issued_at: datetime
    expires_at: datetime
    role: str | None = None

    def remaining_seconds(self, now: datetime) -> float:
        """Lifetime left at ``now`` (negative once expired)."""
        return (self.expires_at - now).total_seconds()


class ITokenCodec(ABC):
    """
    Interface for token creation and structural verification.

    Verification covers signature, issuer, audience, token kind and expiry
    only. Whether a token was revoked or rotated away is decided by the
    session services on top of this.
    """

    @abstractmethod
    def issue_access(self, subject_id: str, email: str, role: str) -> str:
        """
        Create a signed access token.

        Returns:
            Encoded token string
        """
        pass

    @abstractmethod
    def issue_refresh(self, subject_id: str, email: str) -> str:
        """
        Create a signed refresh token.

        Returns:
            Encoded token string, unique even when issued twice in the same second
        """
        pass

    @abstractmethod
    def verify(self, token: str, expected_kind: TokenKind) -> Claims:
        """
        Verify and decode a token.

        Args:
            token: Encoded token
            expected_kind: Kind the caller is willing to accept

        Returns:
            Claims of the token

        Raises:
            TokenExpiredError: If the token is past its expiry
            TokenInvalidError: For any other verification failure
        """
        pass

    @property
    @abstractmethod
    def access_token_lifetime_seconds(self) -> int:
        """Lifetime of newly issued access tokens."""
        pass

    @property
    @abstractmethod
    def refresh_token_lifetime_seconds(self) -> int:
        """Lifetime of newly issued refresh tokens."""
        pass
