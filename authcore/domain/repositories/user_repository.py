"""User repository interface - the identity collaborator of the session core.

The session core never stores or hashes passwords itself. It asks the
repository to create a credential, to look one up, and to check a
presented password against it. Where and how users are persisted is
an infrastructure detail.
"""

from abc import ABC, abstractmethod

from authcore.domain.entities.user import NewUser, User


class IUserRepository(ABC):
    """
    Identity facts consumed by the session core.

    Implementations must raise ``DuplicateError`` from ``create_user``
    when the (normalized) email is already registered, and
    ``InfrastructureError`` when the backing store is unreachable.
    """

    @abstractmethod
    async def create_user(self, new_user: NewUser) -> User:
        """
        Persist a new credential.

        Args:
            new_user: Registration fields, password in plain text

        Returns:
            The persisted user (with id and timestamps)

        Raises:
            DuplicateError: If the email is already registered
        """
        pass

    @abstractmethod
    async def find_by_email(self, email: str) -> User | None:
        """
        Find a user by normalized email address.

        Returns:
            User if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_id(self, id: int) -> User | None:
        """
        Retrieve a user by id.

        Returns:
            User if found, None otherwise
        """
        pass

    @abstractmethod
    async def verify_password(self, user: User | None, password: str) -> bool:
        """
        Check a plain text password against the user's stored hash.

        With no user (unknown email) the password is still checked, against
        a fixed dummy hash, so the call takes as long as a real check.

        Returns:
            True if the password matches, False otherwise (always False
            without a user)
        """
        pass
