"""
auth/models.py -- Domain types for authentication entities.

Pattern: Data class (pure data container, zero logic). Stores and services
do the work.

Layer rule: no imports from api/, core/, or tasks/.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Role(str, Enum):
    """Coarse privilege tier attached to an identity at registration."""

    user = "user"
    admin = "admin"


@dataclass
class User:
    """A stored credential record.

    hashed_password is a bcrypt hash, never the plaintext. It must not be
    copied into any API response model -- see api/routes/v1/auth.py.

    The subject identifier carried in tokens is str(id).
    """

    email: str
    hashed_password: str
    role: Role = Role.user
    id: int | None = None
    created_at: str | None = None

    @property
    def subject_id(self) -> str:
        return str(self.id)


@dataclass(frozen=True)
class IdentityClaim:
    """The decoded, verified payload of a bearer token.

    Built fresh on every authenticated request and discarded with it.
    """

    subject_id: str
    role: Role
    issued_at: datetime
    expires_at: datetime

    @property
    def is_admin(self) -> bool:
        return self.role is Role.admin
