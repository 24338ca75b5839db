"""Session orchestrator - application layer entry point for authentication.

Use cases exposed to controllers:
1. register: create a credential and open a session
2. login: rate-limited credential check, then open a session
3. refresh: exchange the current refresh token for a new pair (rotation)
4. logout: revoke the access token and drop the refresh token
5. verify_access: accept or reject an access token on a request
6. logout_all: end every session of the token's subject

DEPENDENCY INVERSION in action:
- Depends on ITokenCodec, IUserRepository, ICache and IClock abstractions
- No dependencies on PyJWT, Redis or SQLAlchemy

Token and credential failures are reported with generic messages. The
precise reason is only logged.
"""

import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar

from authcore.application.dtos.auth_dto import AuthResultDTO, RegisterDTO, TokenPairDTO
from authcore.application.dtos.user_dto import UserDTO
from authcore.application.exceptions.exceptions import (
    AuthenticationError,
    InfrastructureError,
    RateLimitExceededError,
    TokenInvalidError,
    TokenRevokedError,
)
from authcore.application.services.credential_validator import CredentialValidator
from authcore.application.services.rate_limiter import RateLimiter
from authcore.application.services.refresh_token_store import (
    RefreshTokenStore,
    RotationResult,
)
from authcore.application.services.revocation_registry import RevocationRegistry
from authcore.domain.entities.user import NewUser, User, normalize_email
from authcore.domain.repositories.user_repository import IUserRepository
from authcore.domain.services.token_codec import Claims, ITokenCodec, TokenKind

logger = logging.getLogger(__name__)

T = TypeVar("T")

INVALID_REFRESH_TOKEN = "Invalid refresh token"


class SessionOrchestrator:
    """
    Issues, rotates and revokes sessions for users.

    A session is an access token plus the one refresh token on record for
    the subject. Every multi-step operation either completes or raises; no
    tokens are handed out unless the refresh token was stored.
    """

    def __init__(
        self,
        user_repository: IUserRepository,
        token_codec: ITokenCodec,
        refresh_store: RefreshTokenStore,
        revocation_registry: RevocationRegistry,
        rate_limiter: RateLimiter,
        credential_validator: CredentialValidator | None = None,
        login_rate_limit_attempts: int = 5,
        login_rate_limit_window_seconds: int = 900,
        ip_rate_limit_attempts: int = 20,
        repository_timeout_seconds: float = 5.0,
    ):
        """
        Initialize the orchestrator with its collaborators.

        Args:
            user_repository: Identity facts (create, look up, check password)
            token_codec: Token signing and structural verification
            refresh_store: Current refresh token per subject
            revocation_registry: Revoked access tokens
            rate_limiter: Login attempt counting
            credential_validator: Password policy (default policy if omitted)
            login_rate_limit_attempts: Login attempts per email per window
            login_rate_limit_window_seconds: Rate-limit window length
            ip_rate_limit_attempts: Login attempts per client address per window
            repository_timeout_seconds: Upper bound for each repository call
        """
        self._users = user_repository
        self._codec = token_codec
        self._refresh_store = refresh_store
        self._revocations = revocation_registry
        self._rate_limiter = rate_limiter
        self._validator = credential_validator or CredentialValidator()
        self._login_attempts = login_rate_limit_attempts
        self._login_window = login_rate_limit_window_seconds
        self._ip_attempts = ip_rate_limit_attempts
        self._repository_timeout = repository_timeout_seconds

    async def register(self, dto: RegisterDTO) -> AuthResultDTO:
        """
        Create a credential and open its first session.

        The password policy is checked before the repository is touched.

        Raises:
            ValidationError: If the password violates the policy
            DuplicateError: If the email is already registered
            InfrastructureError: If the repository or cache is unavailable
        """
        self._validator.validate(dto.password)

        user = await self._call_repository(
            self._users.create_user(
                NewUser(
                    email=normalize_email(dto.email),
                    password=dto.password,
                    first_name=dto.first_name,
                    last_name=dto.last_name,
                )
            )
        )
        logger.info(f"Registered user {user.id}")

        return await self._open_session(user)

    async def login(
        self, email: str, password: str, client_ip: str | None = None
    ) -> AuthResultDTO:
        """
        Authenticate with email and password and open a session.

        Every attempt is charged to the email's rate limit (and to the
        client address when given) before the credential is checked, so
        repeated failures lock the email out whether or not any single
        attempt was correct.

        Raises:
            RateLimitExceededError: If the email or client address is out of attempts
            AuthenticationError: If the email is unknown or the password wrong
            InfrastructureError: If the repository or cache is unavailable
        """
        email = normalize_email(email)

        if client_ip:
            await self._consume(f"ip:{client_ip}", self._ip_attempts)
        await self._consume(email, self._login_attempts)

        user = await self._call_repository(self._users.find_by_email(email))
        # Checked even for an unknown email; same error and cost as a wrong password
        if not await self._call_repository(self._users.verify_password(user, password)):
            if user is None:
                logger.info("Login failed: unknown email")
            else:
                logger.info(f"Login failed: wrong password for user {user.id}")
            raise AuthenticationError()

        logger.info(f"User {user.id} logged in")
        return await self._open_session(user)

    async def refresh(self, refresh_token: str) -> TokenPairDTO:
        """
        Rotate a refresh token into a new access/refresh pair.

        The presented token must be the one currently on record for its
        subject. A token that was already rotated away, revoked or
        superseded by a newer login is rejected the same way as a forged
        one. Not safe to retry with the same token.

        Raises:
            TokenInvalidError: For any unacceptable refresh token
            InfrastructureError: If the repository or cache is unavailable
        """
        claims = self._verify(refresh_token, TokenKind.REFRESH, INVALID_REFRESH_TOKEN)
        user = await self._load_subject(claims)

        access_token = self._codec.issue_access(user.subject_id, user.email, user.role.value)
        new_refresh_token = self._codec.issue_refresh(user.subject_id, user.email)

        result = await self._refresh_store.validate_and_rotate(
            claims.subject_id, refresh_token, new_refresh_token
        )
        if result is RotationResult.REPLAYED:
            raise TokenInvalidError(INVALID_REFRESH_TOKEN)

        return self._token_pair(access_token, new_refresh_token)

    async def logout(self, access_token: str, refresh_token: str) -> None:
        """
        End the session that owns both tokens.

        Revoking the access token and dropping the refresh token are both
        attempted even if one fails; the logout only succeeds if both did.

        Raises:
            TokenInvalidError: If either token is invalid or they belong to
                different subjects
            InfrastructureError: If either revocation could not be recorded
        """
        access_claims = self._verify(access_token, TokenKind.ACCESS)
        refresh_claims = self._verify(refresh_token, TokenKind.REFRESH)
        if access_claims.subject_id != refresh_claims.subject_id:
            logger.warning(
                f"Logout with tokens of different subjects "
                f"({access_claims.subject_id} != {refresh_claims.subject_id})"
            )
            raise TokenInvalidError()

        await self._end_session(access_claims)
        logger.info(f"Subject {access_claims.subject_id} logged out")

    async def logout_all(self, access_token: str) -> None:
        """
        End every session of the access token's subject.

        Drops whichever refresh token is on record and revokes the
        presenting access token.

        Raises:
            TokenInvalidError: If the access token is invalid
            TokenRevokedError: If the access token was already revoked
            InfrastructureError: If either revocation could not be recorded
        """
        claims = await self.verify_access(access_token)
        await self._end_session(claims)
        logger.info(f"Subject {claims.subject_id} logged out of all devices")

    async def verify_access(self, access_token: str) -> Claims:
        """
        Accept or reject an access token presented with a request.

        Returns:
            Claims of the token

        Raises:
            TokenInvalidError: If the token is malformed, expired or not an access token
            TokenRevokedError: If the token was revoked by a logout
            InfrastructureError: If the revocation registry is unavailable
        """
        claims = self._verify(access_token, TokenKind.ACCESS)
        if await self._revocations.is_revoked(claims):
            logger.info(
                f"Rejected revoked access token {claims.token_id} "
                f"for subject {claims.subject_id}"
            )
            raise TokenRevokedError()
        return claims

    async def _open_session(self, user: User) -> AuthResultDTO:
        """Issue a token pair and record the refresh token as the current one."""
        access_token = self._codec.issue_access(user.subject_id, user.email, user.role.value)
        refresh_token = self._codec.issue_refresh(user.subject_id, user.email)

        await self._refresh_store.store(user.subject_id, refresh_token)

        pair = self._token_pair(access_token, refresh_token)
        return AuthResultDTO(**pair.model_dump(), user=UserDTO.from_entity(user))

    async def _end_session(self, access_claims: Claims) -> None:
        results = await asyncio.gather(
            self._revocations.revoke(access_claims),
            self._refresh_store.revoke(access_claims.subject_id),
            return_exceptions=True,
        )
        failures = [r for r in results if isinstance(r, BaseException)]
        if not failures:
            return

        for failure in failures:
            logger.error(
                f"Logout for subject {access_claims.subject_id} incomplete: {failure!r}"
            )
        for failure in failures:
            if not isinstance(failure, InfrastructureError):
                raise failure
        raise InfrastructureError()

    def _verify(
        self, token: str, kind: TokenKind, message: str = "Invalid token"
    ) -> Claims:
        try:
            return self._codec.verify(token, kind)
        except TokenInvalidError as e:
            # TokenExpiredError included; callers only ever see the generic message
            logger.info(f"Rejected {kind.value} token: {e.message}")
            raise TokenInvalidError(message) from e

    async def _load_subject(self, claims: Claims) -> User:
        try:
            user_id = int(claims.subject_id)
        except ValueError:
            logger.warning(f"Refresh token with non-numeric subject {claims.subject_id!r}")
            raise TokenInvalidError(INVALID_REFRESH_TOKEN)

        user = await self._call_repository(self._users.get_by_id(user_id))
        if user is None:
            logger.warning(f"Refresh token for missing user {user_id}")
            raise TokenInvalidError(INVALID_REFRESH_TOKEN)
        return user

    async def _consume(self, identifier: str, limit: int) -> None:
        decision = await self._rate_limiter.consume(identifier, limit, self._login_window)
        if not decision.allowed:
            raise RateLimitExceededError(retry_after=decision.window_seconds)

    async def _call_repository(self, call: Awaitable[T]) -> T:
        """Await a repository call, bounded by the repository timeout."""
        try:
            return await asyncio.wait_for(call, timeout=self._repository_timeout)
        except TimeoutError as e:
            logger.error(
                f"User repository call timed out after {self._repository_timeout}s"
            )
            raise InfrastructureError() from e

    def _token_pair(self, access_token: str, refresh_token: str) -> TokenPairDTO:
        return TokenPairDTO(
            access_token=access_token,
            refresh_token=refresh_token,
            token_type="bearer",
            expires_in=self._codec.access_token_lifetime_seconds,
        )
