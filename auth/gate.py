"""
auth/gate.py -- Role-gated request authorization.

RoleGate is a value object: the set of acceptable roles, plus one check()
method that turns an Authorization header into an IdentityClaim or raises.
It holds no state across requests and is safe to share between threads.

Check order (first failure wins):
  1. Extract the bearer token. Missing or malformed header -> 401.
  2. Verify it. Expired and invalid tokens both -> 401 with the SAME message,
     so the response never reveals which validation step failed.
  3. If required_roles is non-empty and the claim's role is not in it -> 403.

The role in the claim is trusted as signed; there is no per-request database
re-check. A role change takes effect when the holder's token expires.

auth/dependencies.py adapts RoleGate to FastAPI's Depends().
"""

from __future__ import annotations

from dataclasses import dataclass, field

from auth.errors import AuthenticationError, AuthorizationError, TokenError
from auth.models import IdentityClaim, Role
from auth.tokens import TokenService

_INVALID_TOKEN = "Invalid or expired token."


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token from an 'Authorization: Bearer <token>' header, or None."""
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


@dataclass(frozen=True)
class RoleGate:
    """Accepts a request iff it carries a valid token whose role is allowed.

    An empty required_roles means "authenticated, any role".
    """

    required_roles: frozenset[Role] = field(default_factory=frozenset)

    def check(self, authorization: str | None, tokens: TokenService) -> IdentityClaim:
        token = extract_bearer_token(authorization)
        if token is None:
            raise AuthenticationError("No token provided.", code="no_token")

        try:
            claim = tokens.verify(token)
        except TokenError as exc:
            raise AuthenticationError(_INVALID_TOKEN, code="invalid_token") from exc

        if self.required_roles and claim.role not in self.required_roles:
            raise AuthorizationError("Insufficient role for this operation.")
        return claim
