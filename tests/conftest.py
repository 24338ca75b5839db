"""Pytest configuration and shared fixtures.

Unit tests wire the real session services to in-memory fakes:
- FakeClock instead of the wall clock (deterministic expiry)
- InMemoryCache instead of Redis
- FakeUserRepository / FakePasswordHasher instead of SQLAlchemy and Argon2
"""

from datetime import UTC, datetime

import pytest

from authcore.application.services.rate_limiter import RateLimiter
from authcore.application.services.refresh_token_store import RefreshTokenStore
from authcore.application.services.revocation_registry import RevocationRegistry
from authcore.application.services.session_orchestrator import SessionOrchestrator
from authcore.domain.entities.user import User, UserRole
from authcore.infrastructure.cache.memory_cache import InMemoryCache
from authcore.infrastructure.security.jwt_token_codec import JWTTokenCodec
from tests.fakes.clock_fake import FakeClock
from tests.fakes.password_hasher_fake import FakePasswordHasher
from tests.fakes.user_repository_fake import FakeUserRepository

ACCESS_SECRET = "access-secret-for-tests-0123456789abcdef"
REFRESH_SECRET = "refresh-secret-for-tests-0123456789abcdef"
ISSUER = "authcore-test"
AUDIENCE = "authcore-test/api"
STRONG_PASSWORD = "Str0ng!Pass"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock) -> InMemoryCache:
    return InMemoryCache(clock)


@pytest.fixture
def fake_password_hasher() -> FakePasswordHasher:
    return FakePasswordHasher()


@pytest.fixture
def token_codec(clock) -> JWTTokenCodec:
    return JWTTokenCodec(
        access_secret=ACCESS_SECRET,
        refresh_secret=REFRESH_SECRET,
        clock=clock,
        issuer=ISSUER,
        audience=AUDIENCE,
        algorithm="HS512",
        access_token_expire_minutes=30,
        refresh_token_expire_days=7,
    )


@pytest.fixture
def sample_user() -> User:
    """
    A persisted user whose password is STRONG_PASSWORD.

    The password_hash uses the FakePasswordHasher format.
    """
    return User(
        id=1,
        email="test@example.com",
        password_hash=f"HASHED:{STRONG_PASSWORD}",
        role=UserRole.PRO_USER,
        first_name="Test",
        last_name="User",
        created_at=datetime.now(UTC),
        updated_at=datetime.now(UTC),
    )


@pytest.fixture
def user_repository(sample_user, fake_password_hasher) -> FakeUserRepository:
    return FakeUserRepository(
        initial_users=[sample_user], password_hasher=fake_password_hasher
    )


@pytest.fixture
def make_orchestrator(user_repository, token_codec, clock):
    """
    Build a SessionOrchestrator over a given cache.

    Tests that need a failing cache pass their own; the default is the
    shared ``cache`` fixture.
    """

    def _make(cache, **overrides) -> SessionOrchestrator:
        options = {
            "login_rate_limit_attempts": 5,
            "login_rate_limit_window_seconds": 900,
            "ip_rate_limit_attempts": 20,
            "repository_timeout_seconds": 1.0,
        }
        options.update(overrides)
        return SessionOrchestrator(
            user_repository=user_repository,
            token_codec=token_codec,
            refresh_store=RefreshTokenStore(
                cache, ttl_seconds=token_codec.refresh_token_lifetime_seconds
            ),
            revocation_registry=RevocationRegistry(cache, clock),
            rate_limiter=RateLimiter(cache),
            **options,
        )

    return _make


@pytest.fixture
def orchestrator(make_orchestrator, cache) -> SessionOrchestrator:
    return make_orchestrator(cache)
