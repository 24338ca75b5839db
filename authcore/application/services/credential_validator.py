"""Password policy enforced at registration.

Pure functions over the candidate password. No I/O, no hashing; the user
repository hashes whatever passes here.
"""

import string

from authcore.application.exceptions.exceptions import ValidationError

SPECIAL_CHARACTERS = "!@#$%^&*"
MIN_PASSWORD_LENGTH = 8
ALPHANUMERIC = string.ascii_letters + string.digits


class CredentialValidator:
    """
    Checks candidate passwords against the password policy.

    Rules, in the order violations are reported:
    1. At least 8 characters
    2. At least one upper-case letter (A-Z)
    3. At least one lower-case letter (a-z)
    4. At least one digit (0-9)
    5. At least one of ``!@#$%^&*``

    Letter and digit classes are ASCII only; ``É`` is not an upper-case
    letter and ``²`` is not a digit here.
    """

    def __init__(
        self,
        min_length: int = MIN_PASSWORD_LENGTH,
        special_characters: str = SPECIAL_CHARACTERS,
    ):
        self._min_length = min_length
        self._special_characters = special_characters

    def check(self, password: str) -> list[str]:
        """
        Collect every policy violation.

        Returns:
            Violation messages in rule order (empty if the password is acceptable)
        """
        errors: list[str] = []

        if len(password) < self._min_length:
            errors.append(
                f"Password must be at least {self._min_length} characters long"
            )
        if not _contains_any(password, string.ascii_uppercase):
            errors.append("Password must contain at least one uppercase letter")
        if not _contains_any(password, string.ascii_lowercase):
            errors.append("Password must contain at least one lowercase letter")
        if not _contains_any(password, string.digits):
            errors.append("Password must contain at least one number")
        if not _contains_any(password, self._special_characters):
            errors.append(
                "Password must contain at least one special character "
                f"({self._special_characters})"
            )

        return errors

    def validate(self, password: str) -> None:
        """
        Enforce the policy.

        Raises:
            ValidationError: With the first violation as message, all of
                them in ``errors`` and the password's ``strength`` score
        """
        errors = self.check(password)
        if errors:
            raise ValidationError(
                errors[0], errors=errors, strength=self.strength(password)
            )

    @staticmethod
    def strength(password: str) -> int:
        """
        Score a password from 0 to 100.

        Informational only; ``validate`` is what gates registration.
        """
        has_upper = _contains_any(password, string.ascii_uppercase)
        has_lower = _contains_any(password, string.ascii_lowercase)
        has_digit = _contains_any(password, string.digits)
        has_symbol = any(c not in ALPHANUMERIC for c in password)

        score = min(len(password) * 4, 25)
        if has_upper:
            score += 10
        if has_lower:
            score += 10
        if has_digit:
            score += 10
        if has_symbol:
            score += 15

        # Mixed character classes
        if has_upper and has_lower and has_digit:
            score += 15
        if has_symbol:
            score += 15

        return min(score, 100)


def _contains_any(password: str, characters: str) -> bool:
    return any(c in characters for c in password)
