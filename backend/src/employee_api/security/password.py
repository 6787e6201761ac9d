"""Credential store: bcrypt password hashing."""

import bcrypt

from employee_api.config import get_settings


class PasswordService:
    """Hashes and verifies employee passwords with bcrypt."""

    def __init__(self, rounds: int | None = None) -> None:
        """Initialize with a bcrypt cost factor (defaults to settings)."""
        self.rounds = rounds if rounds is not None else get_settings().password_hash_rounds

    def hash_password(self, password: str) -> str:
        """Hash a password with a fresh salt.

        Args:
            password: Plain text password (at most 72 bytes are significant)

        Returns:
            Encoded bcrypt hash, salt and cost included
        """
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=self.rounds)).decode(
            "utf-8"
        )

    def verify_password(self, password: str, hashed: str) -> bool:
        """Check a password against a stored hash.

        Malformed or empty hashes never match.
        """
        if not hashed:
            return False
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
        except (ValueError, UnicodeError):
            return False

    def needs_rehash(self, hashed: str) -> bool:
        """Check whether a hash was made with a different cost factor."""
        parts = hashed.split("$")
        if len(parts) < 4 or not parts[2].isdigit():
            return True
        return int(parts[2]) != self.rounds


_password_service: PasswordService | None = None


def get_password_service() -> PasswordService:
    """Get the shared password service."""
    global _password_service
    if _password_service is None:
        _password_service = PasswordService()
    return _password_service
