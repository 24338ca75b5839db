"""User repository implementation using SQLAlchemy."""

import logging
from functools import lru_cache
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from authcore.application.exceptions.exceptions import (
    DuplicateError,
    InfrastructureError,
)
from authcore.domain.entities.user import NewUser, User, normalize_email
from authcore.domain.repositories.user_repository import IUserRepository
from authcore.domain.services.password_hasher import IPasswordHasher
from authcore.infrastructure.persistence.models.user_model import UserModel

logger = logging.getLogger(__name__)

DUMMY_PASSWORD = "authcore-unknown-user"


@lru_cache(maxsize=4)
def _dummy_hash(password_hasher: IPasswordHasher) -> str:
    """Hash of a password no user has, computed once per hasher."""
    return password_hasher.hash(DUMMY_PASSWORD)


class UserRepository(IUserRepository):
    """
    SQLAlchemy implementation of IUserRepository.

    Each call runs in its own short session; registration commits
    immediately. Returns domain entities, never ORM models. Database
    failures are reported as InfrastructureError.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        password_hasher: IPasswordHasher,
    ):
        """
        Args:
            session_factory: Factory for SQLAlchemy async sessions
            password_hasher: Hashes new passwords and checks presented ones
        """
        self._session_factory = session_factory
        self._password_hasher = password_hasher

    async def create_user(self, new_user: NewUser) -> User:
        email = normalize_email(new_user.email)
        try:
            async with self._session_factory() as session:
                existing = await session.execute(
                    select(UserModel.id).where(UserModel.email == email)
                )
                if existing.scalar_one_or_none() is not None:
                    raise DuplicateError(f"User with email {email} already exists")

                user_model = UserModel(
                    email=email,
                    first_name=new_user.first_name,
                    last_name=new_user.last_name,
                    role=new_user.role.value,
                    password_hash=self._password_hasher.hash(new_user.password),
                )
                session.add(user_model)
                try:
                    await session.commit()
                except IntegrityError as e:
                    # Concurrent registration won the unique index
                    await session.rollback()
                    raise DuplicateError(f"User with email {email} already exists") from e
                await session.refresh(user_model)

                return user_model.to_entity()
        except SQLAlchemyError as e:
            logger.error(f"Failed to create user: {e}")
            raise InfrastructureError() from e

    async def find_by_email(self, email: str) -> Optional[User]:
        return await self._find_one(
            select(UserModel).where(UserModel.email == normalize_email(email))
        )

    async def get_by_id(self, id: int) -> Optional[User]:
        return await self._find_one(select(UserModel).where(UserModel.id == id))

    async def verify_password(self, user: Optional[User], password: str) -> bool:
        if user is None:
            # Unknown email: pay for one verification anyway
            self._password_hasher.verify(password, _dummy_hash(self._password_hasher))
            return False
        return self._password_hasher.verify(password, user.password_hash)

    async def _find_one(self, statement) -> Optional[User]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(statement)
                user_model = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"User lookup failed: {e}")
            raise InfrastructureError() from e

        if user_model is None:
            return None

        return user_model.to_entity()
