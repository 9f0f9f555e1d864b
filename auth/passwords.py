"""
auth/passwords.py -- One-way password hashing with bcrypt.

Using bcrypt directly rather than passlib[bcrypt] because passlib's internal
wrap-bug detection creates a password longer than 72 bytes, which bcrypt 4.x
rejects with an explicit error. Direct bcrypt usage is simpler and has no
compatibility shim.

bcrypt embeds a random salt and the cost factor in every hash it produces, so
the same password hashes differently on each call and verify() needs nothing
but the stored hash. checkpw() compares in constant time.

The cost factor comes from Settings.bcrypt_rounds. Tests pass rounds=4 (the
bcrypt minimum) to keep the suite fast.
"""

from __future__ import annotations

import base64
import hashlib

import bcrypt


def _encode(plain: str) -> bytes:
    """SHA-256 the password, then base64 it, before bcrypt sees it.

    bcrypt only reads the first 72 bytes of its input, so two passwords sharing
    a 72-byte prefix would hash alike. The 44-byte base64 digest keeps every
    byte of the password significant and contains no NUL bytes.
    """
    return base64.b64encode(hashlib.sha256(plain.encode("utf-8")).digest())


class PasswordHasher:
    """Salted, adaptive-cost password hashing.

    Usage:
        hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
        stored = hasher.hash("secret")
        hasher.verify("secret", stored)   # True
    """

    def __init__(self, rounds: int = 12) -> None:
        if not 4 <= rounds <= 31:
            raise ValueError("bcrypt rounds must be between 4 and 31")
        self.rounds = rounds

    def hash(self, plain: str) -> str:
        """Return a bcrypt hash of the given plaintext password."""
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(_encode(plain), salt).decode("utf-8")

    def verify(self, plain: str, password_hash: str | None) -> bool:
        """Return True if the plaintext password matches the bcrypt hash.

        A malformed or missing hash returns False -- bcrypt's "Invalid salt"
        ValueError must not reach the caller.
        """
        if not password_hash:
            return False
        try:
            return bcrypt.checkpw(_encode(plain), password_hash.encode("utf-8"))
        except (ValueError, TypeError):
            return False
