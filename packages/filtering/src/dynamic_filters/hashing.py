"""Password hashing for password-kind attributes.

bcrypt-based, with a rehash check for cost-factor upgrades.
"""

from __future__ import annotations

import bcrypt


class PasswordHasher:
    """Password hasher using bcrypt.

    Example:
        ```python
        hasher = PasswordHasher()

        hashed = hasher.hash("user_password")
        if hasher.verify(hashed, "user_password") and hasher.needs_rehash(hashed):
            hashed = hasher.hash("user_password")
        ```
    """

    def __init__(self, *, rounds: int = 12) -> None:
        """Initialize the password hasher.

        Args:
            rounds: bcrypt rounds (cost factor, default 12).
        """
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a plaintext password."""
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password.encode(), salt).decode()

    def verify(self, hashed_password: str, password: str) -> bool:
        """Return True if *password* matches *hashed_password*."""
        try:
            return bool(bcrypt.checkpw(password.encode(), hashed_password.encode()))
        except ValueError:
            # Invalid hash format or malformed hash
            return False

    def is_hashed(self, value: str) -> bool:
        """Whether *value* already looks like a bcrypt hash."""
        return value.startswith(("$2a$", "$2b$", "$2y$")) and len(value) == 60

    def needs_rehash(self, hashed_password: str) -> bool:
        """True when the hash was made with fewer rounds than configured."""
        # bcrypt format: $2b$12$...
        parts = hashed_password.split("$")
        if len(parts) >= 3:
            try:
                return int(parts[2]) < self.rounds
            except ValueError:
                pass
        return False


__all__: list[str] = ["PasswordHasher"]
