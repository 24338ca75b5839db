"""FastAPI dependency injection setup.

This module is the COMPOSITION ROOT - where we wire up dependencies.

This is where we decide:
- Use Argon2PasswordHasher for stored credentials
- Use SQLAlchemy for the user repository
- Use PyJWT for tokens
- Use the cache built at startup (Redis, or in-memory for a single worker)

The application layer only knows about interfaces. Every dependency below
can be replaced in tests through ``app.dependency_overrides``.
"""

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from authcore.application.exceptions import TokenInvalidError
from authcore.application.services.credential_validator import CredentialValidator
from authcore.application.services.rate_limiter import RateLimiter
from authcore.application.services.refresh_token_store import RefreshTokenStore
from authcore.application.services.revocation_registry import RevocationRegistry
from authcore.application.services.session_orchestrator import SessionOrchestrator
from authcore.domain.repositories.cache import ICache
from authcore.domain.repositories.user_repository import IUserRepository
from authcore.domain.services.clock import IClock
from authcore.domain.services.password_hasher import IPasswordHasher
from authcore.domain.services.token_codec import Claims, ITokenCodec
from authcore.infrastructure.config.settings import Settings, get_settings
from authcore.infrastructure.persistence.database import (
    create_database_engine,
    create_session_factory,
)
from authcore.infrastructure.repositories.user_repository_impl import UserRepository
from authcore.infrastructure.security.argon2_password_hasher import Argon2PasswordHasher
from authcore.infrastructure.security.jwt_token_codec import JWTTokenCodec
from authcore.infrastructure.system_clock import SystemClock

# Module-level singletons (created once, reused throughout app lifecycle)
_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker | None = None
_password_hasher: IPasswordHasher | None = None
_clock = SystemClock()


def get_database_engine(settings: Settings = Depends(get_settings)) -> AsyncEngine:
    """Get or create database engine singleton."""
    global _engine
    if _engine is None:
        _engine = create_database_engine(settings)
    return _engine


def get_session_factory(
    engine: AsyncEngine = Depends(get_database_engine),
) -> async_sessionmaker:
    """Get or create session factory singleton."""
    global _session_factory
    if _session_factory is None:
        _session_factory = create_session_factory(engine)
    return _session_factory


def get_clock() -> IClock:
    return _clock


def get_password_hasher() -> IPasswordHasher:
    """
    Dependency that provides password hasher.

    Singleton; Argon2PasswordHasher is stateless. Tests may override it:

        app.dependency_overrides[get_password_hasher] = lambda: FakePasswordHasher()
    """
    global _password_hasher
    if _password_hasher is None:
        _password_hasher = Argon2PasswordHasher()
    return _password_hasher


def get_cache(request: Request) -> ICache:
    """The shared cache built in the application lifespan."""
    return request.app.state.cache


def get_user_repository(
    session_factory: async_sessionmaker = Depends(get_session_factory),
    password_hasher: IPasswordHasher = Depends(get_password_hasher),
) -> IUserRepository:
    return UserRepository(session_factory, password_hasher)


def get_token_codec(
    settings: Settings = Depends(get_settings),
    clock: IClock = Depends(get_clock),
) -> ITokenCodec:
    """Dependency that provides a JWTTokenCodec configured from settings."""
    return JWTTokenCodec(
        access_secret=settings.access_token_secret,
        refresh_secret=settings.refresh_token_secret,
        clock=clock,
        issuer=settings.token_issuer,
        audience=settings.token_audience,
        algorithm=settings.algorithm,
        access_token_expire_minutes=settings.access_token_expire_minutes,
        refresh_token_expire_days=settings.refresh_token_expire_days,
    )


def get_session_orchestrator(
    user_repository: IUserRepository = Depends(get_user_repository),
    token_codec: ITokenCodec = Depends(get_token_codec),
    cache: ICache = Depends(get_cache),
    clock: IClock = Depends(get_clock),
    settings: Settings = Depends(get_settings),
) -> SessionOrchestrator:
    """
    Dependency that provides the SessionOrchestrator.

    Dependency Graph:
        FastAPI endpoint
            → get_session_orchestrator()
                → get_user_repository() → get_session_factory() → Settings
                → get_token_codec() → Settings, Clock
                → get_cache() → app.state.cache (lifespan)
    """
    return SessionOrchestrator(
        user_repository=user_repository,
        token_codec=token_codec,
        refresh_store=RefreshTokenStore(
            cache, ttl_seconds=token_codec.refresh_token_lifetime_seconds
        ),
        revocation_registry=RevocationRegistry(cache, clock),
        rate_limiter=RateLimiter(cache),
        credential_validator=CredentialValidator(),
        login_rate_limit_attempts=settings.login_rate_limit_attempts,
        login_rate_limit_window_seconds=settings.login_rate_limit_window_seconds,
        ip_rate_limit_attempts=settings.ip_rate_limit_attempts,
        repository_timeout_seconds=settings.repository_timeout_seconds,
    )


# auto_error=False allows us to return 401 instead of 403 when credentials are missing
security = HTTPBearer(auto_error=False)


def get_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> str:
    """Extract the raw Bearer token from the Authorization header."""
    if credentials is None:
        raise TokenInvalidError("Missing authorization credentials")
    return credentials.credentials


async def get_current_claims(
    access_token: str = Depends(get_bearer_token),
    orchestrator: SessionOrchestrator = Depends(get_session_orchestrator),
) -> Claims:
    """
    Dependency that accepts or rejects the request's access token.

    Usage in endpoints:
        @router.get("/me")
        async def get_me(claims: Claims = Depends(get_current_claims)):
            ...

    Raises:
        TokenInvalidError / TokenRevokedError: converted to 401 by exception handler
    """
    return await orchestrator.verify_access(access_token)
