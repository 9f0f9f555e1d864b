"""
auth/tokens.py -- Stateless bearer tokens (JWT, HS256).

Security design decisions:
  JWT: python-jose with HS256. Tokens are signed with the process secret and
       carry the subject id, role, issue time and expiry. There is no server
       side session store: any process holding the secret can verify a token
       without a database round-trip. The one-hour default lifetime bounds the
       exposure of a leaked token in place of revocation.

  Secret: passed to TokenService at construction. api/main.py builds one
       service at startup from Settings.secret_key and stores it on app.state.
       Nothing in this module reads configuration.

  Failures: verify() raises TokenExpiredError for an expired but otherwise
       valid token and InvalidSignatureError for everything else, including
       library and key errors. No other exception escapes verify().

Layer rule: no imports from api/ or tasks/.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JOSEError, jwt

from auth.errors import InvalidSignatureError, TokenExpiredError
from auth.models import IdentityClaim, Role

logger = logging.getLogger("taskguard.auth")

_ALGORITHM = "HS256"
DEFAULT_LIFETIME_SECONDS = 3600


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """Issues and verifies signed, time-bounded identity tokens.

    Usage:
        tokens = TokenService(secret=settings.secret_key)
        token = tokens.issue("42", Role.user)
        claim = tokens.verify(token)   # IdentityClaim(subject_id="42", role=Role.user, ...)

    clock is injectable so tests can mint tokens that are already expired.
    """

    def __init__(
        self,
        secret: str,
        lifetime_seconds: int = DEFAULT_LIFETIME_SECONDS,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret:
            raise ValueError("TokenService requires a non-empty signing secret")
        if lifetime_seconds <= 0:
            raise ValueError("lifetime_seconds must be positive")
        self._secret = secret
        self.lifetime_seconds = lifetime_seconds
        self._clock = clock

    def issue(self, subject_id: str, role: Role) -> str:
        """Encode a signed JWT for the given identity, valid for lifetime_seconds."""
        now = self._clock()
        payload = {
            "sub": subject_id,
            "role": Role(role).value,
            "iat": now,
            "exp": now + timedelta(seconds=self.lifetime_seconds),
        }
        return jwt.encode(payload, self._secret, algorithm=_ALGORITHM)

    def verify(self, token: str) -> IdentityClaim:
        """Decode and verify a JWT. Returns the claim or raises a TokenError subclass."""
        try:
            payload = jwt.decode(token, self._secret, algorithms=[_ALGORITHM])
        except ExpiredSignatureError as exc:
            raise TokenExpiredError("Token has expired") from exc
        except (JOSEError, ValueError, TypeError, AttributeError) as exc:
            raise InvalidSignatureError("Token could not be validated") from exc

        try:
            return IdentityClaim(
                subject_id=str(payload["sub"]),
                role=Role(payload["role"]),
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        except (KeyError, ValueError, TypeError, OverflowError) as exc:
            # Signed by us but not shaped like a token we issue.
            logger.warning("Rejected signed token with unusable payload")
            raise InvalidSignatureError("Token payload is incomplete") from exc
