"""Unit tests for password hashers.

These tests verify both the fake and real password hasher implementations.
"""

import pytest

from authcore.infrastructure.security.argon2_password_hasher import Argon2PasswordHasher
from tests.fakes.password_hasher_fake import FakePasswordHasher

pytestmark = pytest.mark.unit


class TestFakePasswordHasher:
    """Test the fake password hasher implementation."""

    def test_hash_adds_prefix(self):
        assert FakePasswordHasher().hash("Str0ng!Pass") == "HASHED:Str0ng!Pass"

    def test_verify_correct_and_wrong_password(self):
        # Arrange
        hasher = FakePasswordHasher()
        hashed = hasher.hash("Str0ng!Pass")

        # Act & Assert
        assert hasher.verify("Str0ng!Pass", hashed) is True
        assert hasher.verify("Wr0ng!Pass", hashed) is False

    def test_verify_rejects_foreign_hash(self):
        assert FakePasswordHasher().verify("password", "$argon2id$whatever") is False


class TestArgon2PasswordHasher:
    """Test the real Argon2 password hasher implementation."""

    def test_hash_is_argon2id_and_salted(self):
        # Arrange
        hasher = Argon2PasswordHasher()

        # Act
        first = hasher.hash("Str0ng!Pass")
        second = hasher.hash("Str0ng!Pass")

        # Assert
        assert first.startswith("$argon2id$")
        assert first != second

    def test_verify_correct_and_wrong_password(self):
        hasher = Argon2PasswordHasher()
        hashed = hasher.hash("Str0ng!Pass")

        assert hasher.verify("Str0ng!Pass", hashed) is True
        assert hasher.verify("Wr0ng!Pass", hashed) is False

    def test_verify_malformed_hash_returns_false(self):
        hasher = Argon2PasswordHasher()

        assert hasher.verify("Str0ng!Pass", "not-a-hash") is False
        assert hasher.verify("Str0ng!Pass", "HASHED:Str0ng!Pass") is False
