"""
auth/service.py -- Registration and login.

AuthService composes the three pieces a login flow needs: the user store,
the password hasher and the token service. Route handlers call it and never
touch hashing or SQL themselves.

Security design decisions:
  Unknown email and wrong password produce the SAME AuthenticationError
  ("invalid_credentials"), so login responses do not reveal which accounts
  exist.

  Timing equalization: authenticate() always runs bcrypt, against a dummy
  hash when the email is unknown, so response time does not reveal account
  existence either. The dummy is computed once per service with the same cost
  factor as real hashes.

  Registration role: absent or empty means "user". Any value other than
  "user" or "admin" is rejected (invalid_role) rather than stored.

Layer rule: no imports from api/ or tasks/.
"""

from __future__ import annotations

import logging
import re

from sqlalchemy.exc import IntegrityError

from auth.errors import AuthenticationError, ConflictError, ValidationError
from auth.models import Role, User
from auth.passwords import PasswordHasher
from auth.store import UserStore
from auth.tokens import TokenService

logger = logging.getLogger("taskguard.auth")

# Deliberately loose: one "@" with something on each side, no whitespace.
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+$")


def parse_role(value: str | Role | None) -> Role:
    """Map a client-supplied role to Role. Empty means user; unknown values are rejected."""
    if not value:
        return Role.user
    try:
        return Role(value)
    except ValueError:
        raise ValidationError(
            f"Unknown role {value!r}. Expected one of: user, admin.",
            code="invalid_role",
        ) from None


class AuthService:
    """Credential registration and verification, token issuance at login."""

    def __init__(self, store: UserStore, hasher: PasswordHasher, tokens: TokenService) -> None:
        self.store = store
        self.hasher = hasher
        self.tokens = tokens
        self._dummy_hash = hasher.hash("taskguard_timing_dummy")

    def register(self, email: str | None, password: str | None, role: str | Role | None = None) -> User:
        """Create a credential record and return it (with id set).

        Raises ValidationError (missing_fields, invalid_email, invalid_role)
        or ConflictError (identity_exists).
        """
        email = (email or "").strip()
        if not email or not password:
            raise ValidationError("Email and password are required.", code="missing_fields")
        if not _EMAIL_RE.match(email):
            raise ValidationError("Email address is not valid.", code="invalid_email")
        user = User(email=email, hashed_password=self.hasher.hash(password), role=parse_role(role))

        try:
            user.id = self.store.create_user(user)
        except IntegrityError as exc:
            raise ConflictError("A user with that email already exists.", code="identity_exists") from exc

        logger.info("Registered user id=%s role=%s", user.id, user.role.value)
        return user

    def authenticate(self, email: str | None, password: str | None) -> User:
        """Return the user whose credentials match, or raise AuthenticationError.

        Always runs bcrypt whether or not the user exists -- do NOT return
        early before verify().
        """
        if not email or not password:
            raise ValidationError("Email and password are required.", code="missing_fields")
        user = self.store.get_by_email(email.strip())
        if user is None:
            self.hasher.verify(password, self._dummy_hash)
            raise AuthenticationError("Invalid credentials.", code="invalid_credentials")
        if not self.hasher.verify(password, user.hashed_password):
            logger.info("Failed login for user id=%s", user.id)
            raise AuthenticationError("Invalid credentials.", code="invalid_credentials")
        return user

    def login(self, email: str | None, password: str | None) -> str:
        """Authenticate and return a freshly issued bearer token."""
        user = self.authenticate(email, password)
        return self.tokens.issue(user.subject_id, user.role)
