"""
Password hashing with bcrypt

Module: security.authentication.password_hasher
Date: 2026-10-19
Version: 0.1.0
"""

import bcrypt

from ...core.constants import DEFAULT_BCRYPT_ROUNDS

MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """bcrypt hash and verify"""

    def __init__(self, rounds: int = DEFAULT_BCRYPT_ROUNDS):
        """
        Args:
            rounds: Cost factor for bcrypt (10-12 recommended, 4 minimum)
        """
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """
        Hash password using bcrypt

        Args:
            password: Plaintext password

        Returns:
            bcrypt hash (bytes decoded to string)

        Raises:
            ValueError: If password is longer than bcrypt accepts
        """
        encoded = password.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(encoded, salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """
        Verify password against hash

        Returns:
            True if password matches, False otherwise (including
            unreadable hashes)
        """
        try:
            return bcrypt.checkpw(
                password.encode("utf-8"),
                password_hash.encode("utf-8"),
            )
        except ValueError:
            return False
