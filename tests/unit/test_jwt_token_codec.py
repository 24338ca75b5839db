"""Unit tests for JWTTokenCodec.

Tests JWT token issuance and verification:
1. Round trip of claims
2. Kind, issuer, audience and signature checks
3. Expiry against the injected clock
"""

from datetime import timedelta

import jwt
import pytest

from authcore.application.exceptions import TokenExpiredError, TokenInvalidError
from authcore.domain.services.token_codec import TokenKind
from authcore.infrastructure.security.jwt_token_codec import JWTTokenCodec
from tests.conftest import ACCESS_SECRET, AUDIENCE, ISSUER, REFRESH_SECRET

pytestmark = pytest.mark.unit


# === INITIALIZATION TESTS ===


def test_init_rejects_short_secret(clock):
    with pytest.raises(ValueError, match="at least 32 characters"):
        JWTTokenCodec("short", REFRESH_SECRET, clock, ISSUER, AUDIENCE)


def test_init_rejects_shared_secret(clock):
    with pytest.raises(ValueError, match="must differ"):
        JWTTokenCodec(ACCESS_SECRET, ACCESS_SECRET, clock, ISSUER, AUDIENCE)


def test_lifetimes(token_codec):
    assert token_codec.access_token_lifetime_seconds == 30 * 60
    assert token_codec.refresh_token_lifetime_seconds == 7 * 24 * 3600


# === ROUND TRIP ===


def test_access_token_round_trip(token_codec, clock):
    # Act
    token = token_codec.issue_access("42", "user@example.com", "PRO_USER")
    claims = token_codec.verify(token, TokenKind.ACCESS)

    # Assert
    assert claims.subject_id == "42"
    assert claims.email == "user@example.com"
    assert claims.role == "PRO_USER"
    assert claims.kind is TokenKind.ACCESS
    assert claims.issuer == ISSUER
    assert claims.audience == AUDIENCE
    assert claims.issued_at == clock.now()
    assert claims.expires_at == clock.now() + timedelta(minutes=30)


def test_refresh_token_round_trip(token_codec, clock):
    token = token_codec.issue_refresh("42", "user@example.com")
    claims = token_codec.verify(token, TokenKind.REFRESH)

    assert claims.subject_id == "42"
    assert claims.role is None
    assert claims.kind is TokenKind.REFRESH
    assert claims.expires_at == clock.now() + timedelta(days=7)


def test_payload_uses_configured_algorithm_and_claims(token_codec):
    token = token_codec.issue_access("42", "user@example.com", "FREE_USER")

    header = jwt.get_unverified_header(token)
    payload = jwt.decode(token, options={"verify_signature": False})

    assert header["alg"] == "HS512"
    assert payload["typ"] == "access"
    assert set(payload) >= {"sub", "email", "role", "iss", "aud", "iat", "exp", "jti"}


def test_tokens_issued_in_same_second_are_distinct(token_codec):
    first = token_codec.issue_refresh("42", "user@example.com")
    second = token_codec.issue_refresh("42", "user@example.com")

    assert first != second
    assert (
        token_codec.verify(first, TokenKind.REFRESH).token_id
        != token_codec.verify(second, TokenKind.REFRESH).token_id
    )


# === REJECTION ===


def test_refresh_token_is_not_accepted_as_access(token_codec):
    token = token_codec.issue_refresh("42", "user@example.com")

    with pytest.raises(TokenInvalidError):
        token_codec.verify(token, TokenKind.ACCESS)


def test_access_token_is_not_accepted_as_refresh(token_codec):
    token = token_codec.issue_access("42", "user@example.com", "FREE_USER")

    with pytest.raises(TokenInvalidError):
        token_codec.verify(token, TokenKind.REFRESH)


def test_forged_typ_with_right_secret_is_rejected(token_codec, clock):
    # Signed with the access secret but claims to be a refresh token
    now = int(clock.now().timestamp())
    token = jwt.encode(
        {
            "sub": "42", "email": "u@example.com", "iss": ISSUER, "aud": AUDIENCE,
            "iat": now, "exp": now + 60, "jti": "x", "typ": "refresh",
        },
        ACCESS_SECRET,
        algorithm="HS512",
    )

    with pytest.raises(TokenInvalidError):
        token_codec.verify(token, TokenKind.ACCESS)


def test_tampered_token_is_rejected(token_codec):
    token = token_codec.issue_access("42", "user@example.com", "FREE_USER")
    header, payload, signature = token.split(".")
    tampered = f"{header}.{payload}.{signature[:-4]}AAAA"

    with pytest.raises(TokenInvalidError):
        token_codec.verify(tampered, TokenKind.ACCESS)


def test_garbage_is_rejected(token_codec):
    with pytest.raises(TokenInvalidError):
        token_codec.verify("not.a.jwt", TokenKind.ACCESS)


def test_wrong_issuer_is_rejected(token_codec, clock):
    other = JWTTokenCodec(ACCESS_SECRET, REFRESH_SECRET, clock, "someone-else", AUDIENCE)
    token = other.issue_access("42", "user@example.com", "FREE_USER")

    with pytest.raises(TokenInvalidError):
        token_codec.verify(token, TokenKind.ACCESS)


def test_wrong_audience_is_rejected(token_codec, clock):
    other = JWTTokenCodec(ACCESS_SECRET, REFRESH_SECRET, clock, ISSUER, "other/api")
    token = other.issue_access("42", "user@example.com", "FREE_USER")

    with pytest.raises(TokenInvalidError):
        token_codec.verify(token, TokenKind.ACCESS)


def test_missing_claim_is_rejected(token_codec, clock):
    now = int(clock.now().timestamp())
    token = jwt.encode(
        {"sub": "42", "iss": ISSUER, "aud": AUDIENCE, "iat": now, "exp": now + 60,
         "jti": "x", "typ": "access", "role": "FREE_USER"},
        ACCESS_SECRET,
        algorithm="HS512",
    )

    with pytest.raises(TokenInvalidError):
        token_codec.verify(token, TokenKind.ACCESS)


# === EXPIRY ===


def test_token_valid_until_just_before_expiry(token_codec, clock):
    token = token_codec.issue_access("42", "user@example.com", "FREE_USER")
    clock.advance(minutes=30, seconds=-1)

    assert token_codec.verify(token, TokenKind.ACCESS).subject_id == "42"


def test_token_expired_at_exp(token_codec, clock):
    token = token_codec.issue_access("42", "user@example.com", "FREE_USER")
    clock.advance(minutes=30)

    with pytest.raises(TokenExpiredError):
        token_codec.verify(token, TokenKind.ACCESS)


def test_expired_error_is_reported_as_invalid(token_codec, clock):
    token = token_codec.issue_refresh("42", "user@example.com")
    clock.advance(days=8)

    with pytest.raises(TokenInvalidError) as exc_info:
        token_codec.verify(token, TokenKind.REFRESH)

    assert exc_info.value.error_code == "INVALID_TOKEN"


def test_token_constructed_with_past_expiry_fails(token_codec, clock):
    now = int(clock.now().timestamp())
    token = jwt.encode(
        {"sub": "42", "email": "u@example.com", "iss": ISSUER, "aud": AUDIENCE,
         "iat": now - 3600, "exp": now - 1, "jti": "x", "typ": "access",
         "role": "FREE_USER"},
        ACCESS_SECRET,
        algorithm="HS512",
    )

    with pytest.raises(TokenExpiredError):
        token_codec.verify(token, TokenKind.ACCESS)
