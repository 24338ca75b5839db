"""JWT token codec implementation using PyJWT.

This is an INFRASTRUCTURE detail. The domain layer (ITokenCodec interface)
defines WHAT we need (signed, typed, time-bounded tokens), while this
implementation defines HOW we do it (HMAC-signed JWTs via PyJWT).

Dependency flow:
    SessionOrchestrator (application) → ITokenCodec (domain) ← JWTTokenCodec (infrastructure)
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone

import jwt

from authcore.application.exceptions.exceptions import (
    TokenExpiredError,
    TokenInvalidError,
)
from authcore.domain.services.clock import IClock
from authcore.domain.services.token_codec import Claims, ITokenCodec, TokenKind

logger = logging.getLogger(__name__)

MIN_SECRET_LENGTH = 32
REQUIRED_CLAIMS = ["sub", "email", "iss", "aud", "iat", "exp", "jti", "typ"]


class JWTTokenCodec(ITokenCodec):
    """
    Production token codec using JWT (JSON Web Tokens) via PyJWT.

    Payload:
    - sub: Subject (user id as string)
    - email: Normalized email
    - role: User role (access tokens only)
    - iss / aud: Configured issuer and audience
    - iat / exp: Issued-at and expiry, whole seconds since the epoch
    - jti: Random unique token id (revocation key)
    - typ: "access" or "refresh"

    Security Considerations:
    - Access and refresh tokens are signed with different secrets, so one
      kind can never verify as the other even if ``typ`` were forged
    - Both secrets must be at least 32 characters and must differ
    - Expiry is checked against the injected clock, not the system time
    """

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        clock: IClock,
        issuer: str,
        audience: str,
        algorithm: str = "HS512",
        access_token_expire_minutes: int = 30,
        refresh_token_expire_days: int = 7,
    ):
        """
        Initialize JWT token codec.

        Args:
            access_secret: Signing key for access tokens (min 32 characters)
            refresh_secret: Signing key for refresh tokens (min 32 characters)
            clock: Source of "now" for issuance and expiry checks
            issuer: Value of the ``iss`` claim
            audience: Value of the ``aud`` claim
            algorithm: HMAC algorithm (default: HS512)
            access_token_expire_minutes: Access token lifetime in minutes
            refresh_token_expire_days: Refresh token lifetime in days

        Raises:
            ValueError: If a secret is too short or both secrets are equal
        """
        if len(access_secret) < MIN_SECRET_LENGTH or len(refresh_secret) < MIN_SECRET_LENGTH:
            raise ValueError(
                f"Token secrets must be at least {MIN_SECRET_LENGTH} characters long"
            )
        if access_secret == refresh_secret:
            raise ValueError("Access and refresh token secrets must differ")

        self._secrets = {
            TokenKind.ACCESS: access_secret,
            TokenKind.REFRESH: refresh_secret,
        }
        self._lifetimes = {
            TokenKind.ACCESS: timedelta(minutes=access_token_expire_minutes),
            TokenKind.REFRESH: timedelta(days=refresh_token_expire_days),
        }
        self._clock = clock
        self._issuer = issuer
        self._audience = audience
        self._algorithm = algorithm

    @property
    def access_token_lifetime_seconds(self) -> int:
        return int(self._lifetimes[TokenKind.ACCESS].total_seconds())

    @property
    def refresh_token_lifetime_seconds(self) -> int:
        return int(self._lifetimes[TokenKind.REFRESH].total_seconds())

    def issue_access(self, subject_id: str, email: str, role: str) -> str:
        return self._encode(TokenKind.ACCESS, subject_id, email, {"role": role})

    def issue_refresh(self, subject_id: str, email: str) -> str:
        return self._encode(TokenKind.REFRESH, subject_id, email, {})

    def _encode(self, kind: TokenKind, subject_id: str, email: str, extra: dict) -> str:
        # JWT times are whole seconds; truncate so decoded claims match exactly
        issued_at = self._clock.now().replace(microsecond=0)
        expires_at = issued_at + self._lifetimes[kind]

        payload = {
            "sub": subject_id,
            "email": email,
            "iss": self._issuer,
            "aud": self._audience,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
            "jti": str(uuid.uuid4()),
            "typ": kind.value,
            **extra,
        }
        return jwt.encode(payload, self._secrets[kind], algorithm=self._algorithm)

    def verify(self, token: str, expected_kind: TokenKind) -> Claims:
        """
        Verify signature, issuer, audience, kind and expiry of a token.

        Raises:
            TokenExpiredError: If ``exp`` is not after the clock's now
            TokenInvalidError: For a bad signature, wrong issuer/audience,
                wrong kind, or missing/malformed claims
        """
        try:
            payload = jwt.decode(
                token,
                self._secrets[expected_kind],
                algorithms=[self._algorithm],
                audience=self._audience,
                issuer=self._issuer,
                # Time checks use the injected clock below
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                    "require": REQUIRED_CLAIMS,
                },
            )
        except jwt.PyJWTError as e:
            logger.debug(f"JWT rejected: {e}")
            raise TokenInvalidError(f"Token verification failed: {e}") from e

        if payload["typ"] != expected_kind.value:
            raise TokenInvalidError(
                f"Expected {expected_kind.value} token, got {payload['typ']!r}"
            )

        role = payload.get("role")
        if expected_kind is TokenKind.ACCESS and not isinstance(role, str):
            raise TokenInvalidError("Access token without role claim")

        try:
            claims = Claims(
                subject_id=str(payload["sub"]),
                email=str(payload["email"]),
                kind=expected_kind,
                token_id=str(payload["jti"]),
                issuer=payload["iss"],
                audience=payload["aud"],
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
                role=role if expected_kind is TokenKind.ACCESS else None,
            )
        except (TypeError, ValueError, OverflowError) as e:
            raise TokenInvalidError(f"Malformed token claims: {e}") from e

        if claims.expires_at <= self._clock.now():
            raise TokenExpiredError(f"Token {claims.token_id} expired at {claims.expires_at}")

        return claims
