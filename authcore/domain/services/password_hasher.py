"""Password hashing interface.

The user repository hashes passwords on registration and checks them on
login through this abstraction, so the algorithm and library (Argon2 via
pwdlib in production, a prefixing fake in unit tests) stay swappable.
"""

from abc import ABC, abstractmethod


class IPasswordHasher(ABC):
    """
    Interface for password hashing operations.

    Implementations must be cryptographically secure and use appropriate
    salt generation and iteration counts.
    """

    @abstractmethod
    def hash(self, plain_password: str) -> str:
        """
        Hash a plain text password.

        Args:
            plain_password: The plain text password to hash

        Returns:
            Self-describing hash string (algorithm, parameters, salt, digest)
        """
        pass

    @abstractmethod
    def verify(self, plain_password: str, hashed_password: str) -> bool:
        """
        Verify a plain text password against a hashed password.

        Returns:
            True if password matches, False otherwise (also for malformed hashes)
        """
        pass
