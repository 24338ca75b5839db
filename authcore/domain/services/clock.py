"""Clock interface.

Token issuance, expiry checks and revocation TTLs all depend on "now".
Taking it from an injected clock keeps those computations deterministic
under test.
"""

from abc import ABC, abstractmethod
from datetime import datetime


class IClock(ABC):
    """Source of the current time."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current time as a timezone-aware UTC datetime."""
        pass
