"""Login, logout, session introspection and JWKS endpoints"""
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel
from slowapi.util import get_remote_address

from voyage_admin.api.deps import get_admin_auth, get_current_admin, raise_for_error
from voyage_admin.auth.navigation import visible_navigation
from voyage_admin.auth.permissions import permissions_for
from voyage_admin.auth.service import AdminAuth
from voyage_admin.middleware.monitoring import record_login_attempt
from voyage_admin.middleware.rate_limit import get_rate_limit, limiter
from voyage_admin.schemas.admin_user import AdminProfile, PermissionsResponse
from voyage_admin.schemas.session import LoginRequest, LoginResponse
from voyage_admin.utils.jwt_utils import get_jwks
from voyage_admin.utils.logger import logger

router = APIRouter(tags=["authentication"])

_bearer_scheme = HTTPBearer(auto_error=False)


class LogoutResponse(BaseModel):
    success: bool = True


class NavigationEntry(BaseModel):
    title: str
    href: str


# ---------------------------------------------------------------------------
# POST /auth/login
# ---------------------------------------------------------------------------

@router.post("/auth/login", response_model=LoginResponse)
@limiter.limit(get_rate_limit("login"), key_func=get_remote_address)
def login(
    request: Request,
    credentials: LoginRequest,
    auth: AdminAuth = Depends(get_admin_auth),
) -> LoginResponse:
    """Exchange email + password for an admin session.

    The response carries the session record (profile snapshot, login time and
    provider token). The client stores it and sends
    `Authorization: Bearer <session.provider_session.access_token>` on later calls.
    Failures return a uniform "Invalid email or password" (401) or
    "Access denied" (403).
    """
    result = auth.login(credentials.email, credentials.password)

    if not result.success:
        record_login_attempt(result.error.code)
        logger.warning("Admin login failed", extra={"outcome": result.error.code, "action": "login"})
        raise_for_error(result.error)

    record_login_attempt("success")
    return LoginResponse(user=result.user, session=auth.current_session())


# ---------------------------------------------------------------------------
# POST /auth/logout
# ---------------------------------------------------------------------------

@router.post("/auth/logout", response_model=LogoutResponse)
def logout(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    auth: AdminAuth = Depends(get_admin_auth),
) -> LogoutResponse:
    """End the provider session behind the bearer token.

    Always succeeds: an expired or unknown token has nothing left to end, and
    the client drops its stored session either way.
    """
    if credentials:
        auth.end_session(credentials.credentials)
    return LogoutResponse()


# ---------------------------------------------------------------------------
# Session introspection
# ---------------------------------------------------------------------------

@router.get("/auth/me", response_model=AdminProfile)
def me(admin: AdminProfile = Depends(get_current_admin)) -> AdminProfile:
    """Current administrator, read fresh from the directory."""
    return admin


@router.get("/auth/permissions", response_model=PermissionsResponse)
def my_permissions(admin: AdminProfile = Depends(get_current_admin)) -> PermissionsResponse:
    return PermissionsResponse(
        role=admin.role,
        is_super_admin=admin.role == "super_admin",
        permissions=sorted(permissions_for(admin.role)),
    )


@router.get("/auth/navigation", response_model=List[NavigationEntry])
def navigation(admin: AdminProfile = Depends(get_current_admin)) -> List[NavigationEntry]:
    """Sidebar entries the current administrator may open."""
    return [NavigationEntry(title=item.title, href=item.href) for item in visible_navigation(admin)]


# ---------------------------------------------------------------------------
# GET /.well-known/jwks.json
# ---------------------------------------------------------------------------

@router.get("/.well-known/jwks.json", response_model=Dict[str, Any])
def jwks() -> Dict[str, Any]:
    """Public key set for verifying session tokens issued by the built-in identity provider."""
    return get_jwks()
