"""Fake user repository for testing.

Stores users in a dictionary and records every call, so tests can assert
that e.g. a rejected registration never reached the repository.
"""

import asyncio
from datetime import UTC, datetime

from authcore.application.exceptions import DuplicateError
from authcore.domain.entities.user import NewUser, User, normalize_email
from authcore.domain.repositories.user_repository import IUserRepository
from authcore.domain.services.password_hasher import IPasswordHasher
from tests.fakes.password_hasher_fake import FakePasswordHasher


class FakeUserRepository(IUserRepository):
    """
    In-memory implementation of IUserRepository.

    Attributes:
        calls: Names of the methods invoked, in order
        delay_seconds: Sleep before answering (to exercise timeouts)
    """

    def __init__(
        self,
        initial_users: list[User] | None = None,
        password_hasher: IPasswordHasher | None = None,
    ):
        self._users: dict[int, User] = {}
        self._next_id = 1
        self._hasher = password_hasher or FakePasswordHasher()
        self.calls: list[str] = []
        self.delay_seconds = 0.0

        for user in initial_users or []:
            if user.id is None:
                user.id = self._next_id
            self._users[user.id] = user
            self._next_id = max(self._next_id, user.id + 1)

    async def _enter(self, name: str) -> None:
        self.calls.append(name)
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)

    async def create_user(self, new_user: NewUser) -> User:
        await self._enter("create_user")
        email = normalize_email(new_user.email)
        if any(u.email == email for u in self._users.values()):
            raise DuplicateError(f"User with email {email} already exists")

        now = datetime.now(UTC)
        user = User(
            id=self._next_id,
            email=email,
            password_hash=self._hasher.hash(new_user.password),
            role=new_user.role,
            first_name=new_user.first_name,
            last_name=new_user.last_name,
            created_at=now,
            updated_at=now,
        )
        self._users[user.id] = user
        self._next_id += 1
        return user

    async def find_by_email(self, email: str) -> User | None:
        await self._enter("find_by_email")
        email = normalize_email(email)
        return next((u for u in self._users.values() if u.email == email), None)

    async def get_by_id(self, id: int) -> User | None:
        await self._enter("get_by_id")
        return self._users.get(id)

    async def verify_password(self, user: User | None, password: str) -> bool:
        await self._enter("verify_password")
        if user is None:
            self._hasher.verify(password, self._hasher.hash("unknown-user"))
            return False
        return self._hasher.verify(password, user.password_hash)

    # Helper methods for testing

    def remove(self, id: int) -> None:
        self._users.pop(id, None)

    def count(self) -> int:
        return len(self._users)
