"""
api/routes/v1/auth.py -- Registration, login and identity endpoints.

Routes:
  POST /api/v1/register   -- create a credential record (public)
  POST /api/v1/login      -- password login; returns a bearer token (public)
  GET  /api/v1/me         -- the caller's verified identity claim (any role)
  GET  /api/v1/users      -- list all users (admin only)

Security:
  AuthService.authenticate() provides timing equalization -- use it, never
  inline get_by_email() + verify().
  Wrong email and wrong password return the same invalid_credentials error.
  Cache-Control: no-store on login responses so tokens are not cached.
  Password hashes never leave auth/ -- UserResponse has no hash field.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.models import LoginRequest, LoginResponse, MeResponse, RegisterRequest, RegisterResponse, UserResponse
from auth.dependencies import get_current_identity, require_admin
from auth.models import IdentityClaim
from auth.service import AuthService
from auth.store import UserStore

# Auth policy:
# - POST /api/v1/register: public
# - POST /api/v1/login:    public -- login endpoint must be unauthenticated
# - GET  /api/v1/me:       requires auth (get_current_identity)
# - GET  /api/v1/users:    requires admin (require_admin)
router = APIRouter()


@router.post("/register", response_model=RegisterResponse, status_code=201)
def register(request: Request, body: RegisterRequest) -> RegisterResponse:
    """Register a new identity. role defaults to "user"; unknown roles are rejected."""
    auth_service: AuthService = request.app.state.auth_service
    user = auth_service.register(body.email, body.password, body.role)
    return RegisterResponse(id=user.id)


@router.post("/login", response_model=LoginResponse)
def login(request: Request, body: LoginRequest) -> JSONResponse:
    """Authenticate with email and password; return a signed bearer token."""
    auth_service: AuthService = request.app.state.auth_service
    token = auth_service.login(body.email, body.password)
    resp = JSONResponse(
        status_code=200,
        content=LoginResponse(
            access_token=token,
            token_type="bearer",  # noqa: S106 # nosec B106 -- OAuth token type, not a password
            expires_in=auth_service.tokens.lifetime_seconds,
        ).model_dump(),
    )
    resp.headers["Cache-Control"] = "no-store"
    return resp


@router.get("/me", response_model=MeResponse)
async def me(identity: IdentityClaim = Depends(get_current_identity)) -> MeResponse:
    """Return the identity carried by the caller's token."""
    return MeResponse(
        subject_id=identity.subject_id,
        role=identity.role.value,
        expires_at=identity.expires_at.isoformat(),
    )


@router.get("/users", response_model=list[UserResponse])
def list_users(
    request: Request,
    identity: IdentityClaim = Depends(require_admin),
) -> list[UserResponse]:
    """List all user accounts. Admin only."""
    user_store: UserStore = request.app.state.user_store
    return [UserResponse.from_user(u) for u in user_store.list_users()]
