"""User (credential) domain entity - pure data and invariants, no infrastructure."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from authcore.domain.exceptions import InvalidEntityStateException


class UserRole(str, Enum):
    """Access tiers carried in access-token claims."""

    FREE_USER = "FREE_USER"
    PRO_USER = "PRO_USER"
    POWER_USER = "POWER_USER"
    ENTERPRISE_ADMIN = "ENTERPRISE_ADMIN"
    SYSTEM_ADMIN = "SYSTEM_ADMIN"


def normalize_email(email: str) -> str:
    """Canonical form used for lookups, rate-limit keys and token claims."""
    return email.strip().lower()


@dataclass
class User:
    """
    Credential record as seen by the session core.

    The core never mutates a User; it is created and owned by the
    user repository and handed to the core as read-only input.
    """

    email: str
    password_hash: str
    role: UserRole = UserRole.FREE_USER
    first_name: str = ""
    last_name: str = ""
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.email or "@" not in self.email:
            raise InvalidEntityStateException(
                f"Invalid email address: '{self.email}'. Email must contain '@' symbol."
            )

        if not self.password_hash:
            raise InvalidEntityStateException(
                "Password hash is required. User cannot exist without authentication credentials."
            )

        self.email = normalize_email(self.email)
        self.role = UserRole(self.role)

    @property
    def subject_id(self) -> str:
        """Token subject for this user (``sub`` claim)."""
        if self.id is None:
            raise InvalidEntityStateException(
                "User has no id yet. Only persisted users can be token subjects."
            )
        return str(self.id)


@dataclass(frozen=True)
class NewUser:
    """Registration fields passed to the repository to create a credential."""

    email: str
    password: str = field(repr=False)
    first_name: str = ""
    last_name: str = ""
    role: UserRole = UserRole.FREE_USER
