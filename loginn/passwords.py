"""bcrypt password hashing."""

from __future__ import annotations

import bcrypt

# bcrypt ignores input beyond 72 bytes; longer passwords are rejected upstream
MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """Slow, salted one-way password hashing.

    Args:
        rounds: bcrypt work factor (log2 of the iteration count)
    """

    def __init__(self, rounds: int = 10):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(self.rounds)).decode("ascii")

    def verify(self, password: str, password_hash: str) -> bool:
        """Check a cleartext password against a stored hash.

        The comparison is constant-time (bcrypt.checkpw). A corrupt stored hash
        counts as a mismatch.
        """
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("ascii"))
        except ValueError:
            return False
