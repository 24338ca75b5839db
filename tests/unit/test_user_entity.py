"""Unit tests for the User entity and its DTO."""

from datetime import UTC, datetime

import pytest

from authcore.application.dtos.user_dto import UserDTO
from authcore.domain.entities.user import NewUser, User, UserRole, normalize_email
from authcore.domain.exceptions import InvalidEntityStateException

pytestmark = pytest.mark.unit


def test_email_is_normalized():
    user = User(email="  Test@Example.COM ", password_hash="HASHED:x")

    assert user.email == "test@example.com"


def test_default_role_is_free_user():
    assert User(email="a@b.com", password_hash="HASHED:x").role is UserRole.FREE_USER


def test_role_string_is_coerced_to_enum():
    user = User(email="a@b.com", password_hash="HASHED:x", role="POWER_USER")

    assert user.role is UserRole.POWER_USER


def test_unknown_role_is_rejected():
    with pytest.raises(ValueError):
        User(email="a@b.com", password_hash="HASHED:x", role="ROOT")


def test_email_without_at_sign_is_rejected():
    with pytest.raises(InvalidEntityStateException) as exc_info:
        User(email="not-an-email", password_hash="HASHED:x")

    assert exc_info.value.error_code == "INVALID_ENTITY_STATE"


def test_empty_password_hash_is_rejected():
    with pytest.raises(InvalidEntityStateException):
        User(email="a@b.com", password_hash="")


def test_subject_id_requires_persisted_user():
    assert User(id=42, email="a@b.com", password_hash="HASHED:x").subject_id == "42"

    with pytest.raises(InvalidEntityStateException):
        _ = User(email="a@b.com", password_hash="HASHED:x").subject_id


def test_new_user_repr_hides_password():
    new_user = NewUser(email="a@b.com", password="Str0ng!Pass")

    assert "Str0ng!Pass" not in repr(new_user)


def test_normalize_email():
    assert normalize_email(" A@B.Com ") == "a@b.com"


def test_user_dto_from_persisted_entity(sample_user):
    dto = UserDTO.from_entity(sample_user)

    assert dto.id == 1
    assert dto.email == "test@example.com"
    assert dto.role is UserRole.PRO_USER
    assert "password_hash" not in dto.model_dump()


def test_user_dto_rejects_unpersisted_entity():
    user = User(email="a@b.com", password_hash="HASHED:x", created_at=datetime.now(UTC))

    with pytest.raises(ValueError):
        UserDTO.from_entity(user)
