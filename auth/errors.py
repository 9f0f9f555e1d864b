"""
auth/errors.py -- Error taxonomy for authentication and authorization.

Every AccessError carries a machine-readable code, a human-readable message,
and the HTTP status the API layer should map it to. api/main.py registers a
single exception handler for AccessError, so services and the gate raise
these instead of HTTPException and stay transport-agnostic.

TokenError is internal to auth/tokens.py. The gate converts it to
AuthenticationError with one message for every cause, so clients cannot tell
an expired token from a forged one.
"""

from __future__ import annotations


class AccessError(Exception):
    """Base class for every caller-visible failure."""

    status_code: int = 400
    code: str = "error"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class ValidationError(AccessError):
    """Missing or malformed input the client can correct."""

    status_code = 400
    code = "validation_error"


class AuthenticationError(AccessError):
    """No token, an invalid or expired token, or bad credentials."""

    status_code = 401
    code = "unauthenticated"


class AuthorizationError(AccessError):
    """Valid identity without the privilege or ownership the operation needs."""

    status_code = 403
    code = "forbidden"


class NotFoundError(AccessError):
    status_code = 404
    code = "not_found"


class ConflictError(AccessError):
    """Duplicate identity on registration."""

    status_code = 409
    code = "conflict"


class TokenError(Exception):
    """Raised by TokenService.verify(). Never shown to clients as-is."""


class InvalidSignatureError(TokenError):
    """Signature mismatch, corrupt encoding, or an unusable payload."""


class TokenExpiredError(TokenError):
    """Signature is valid but the expiry has passed."""
