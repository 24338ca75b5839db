"""Argon2 password hasher implementation using pwdlib.

pwdlib is only imported here. The user repository depends on the
IPasswordHasher abstraction, so unit tests swap in a fake and never pay
for real key derivation.
"""

from pwdlib import PasswordHash
from pwdlib.exceptions import PwdlibError
from pwdlib.hashers.argon2 import Argon2Hasher

from authcore.domain.services.password_hasher import IPasswordHasher


class Argon2PasswordHasher(IPasswordHasher):
    """
    Production password hasher using Argon2id via pwdlib.

    Uses pwdlib's defaults (memory cost 64 MB, 3 iterations, parallelism 4).
    Hashes are self-describing: ``$argon2id$v=19$m=65536,t=3,p=4$<salt>$<hash>``.
    """

    def __init__(self):
        self._password_hash = PasswordHash((Argon2Hasher(),))

    def hash(self, plain_password: str) -> str:
        """Hash a password with a fresh random salt."""
        return self._password_hash.hash(plain_password)

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        """
        Verify a password in constant time.

        Malformed or foreign hashes verify as False rather than raising,
        so a corrupt record reads the same as a wrong password.
        """
        try:
            is_valid, _ = self._password_hash.verify_and_update(
                plain_password, hashed_password
            )
            return is_valid
        except (PwdlibError, ValueError):
            return False
