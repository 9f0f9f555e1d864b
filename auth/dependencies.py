"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

Requires(*roles) is a callable class, not a closure: FastAPI calls the
instance with the Request, the instance delegates to its RoleGate, and the
verified claim is both returned to the route and attached to
request.state.identity for middleware that runs after the route.

The TokenService comes from request.app.state.tokens (built once in the
lifespan from Settings). Tests swap it by patching app.state.

get_current_identity: any authenticated role.
require_admin:        admin role only.

Failures raise AccessError subclasses; api/main.py turns them into the
standard error envelope with the right status code.

Layer rule: may import from fastapi (for Request) because this module is part
of the FastAPI dependency injection system. No imports from api/ or tasks/.
"""

from fastapi import Request

from auth.gate import RoleGate
from auth.models import IdentityClaim, Role
from auth.tokens import TokenService


class Requires:
    """Dependency that gates a route on a valid token and, optionally, a role.

    Use as a FastAPI dependency:
        @router.get("/admin-only")
        def route(identity: IdentityClaim = Depends(require_admin)): ...
    """

    def __init__(self, *roles: Role) -> None:
        self.gate = RoleGate(frozenset(roles))

    def __call__(self, request: Request) -> IdentityClaim:
        tokens: TokenService = request.app.state.tokens
        claim = self.gate.check(request.headers.get("Authorization"), tokens)
        request.state.identity = claim
        return claim


get_current_identity = Requires()
require_admin = Requires(Role.admin)
