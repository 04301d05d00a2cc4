"""API dependencies for authentication and authorization.

Every privileged request carries ``Authorization: Bearer <access_token>``, the
provider session issued at login. The token is resolved through
:meth:`AdminAuth.verify_access_token` on each request, so the caller's role
and ``is_active`` flag are read from the directory rather than trusted from
the client's cached session.

Permissions
-----------
Use :func:`require_permission` for tag-gated endpoints (``"inquiries:read"``)
and :func:`require_super_admin` for user administration, which is gated on
the role itself rather than on a permission tag.
"""
from typing import Callable, NamedTuple, NoReturn, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from voyage_admin.auth.errors import AuthError
from voyage_admin.auth.service import AdminAuth, build_admin_auth
from voyage_admin.auth.session_store import MemorySessionStore
from voyage_admin.config import settings
from voyage_admin.database import get_db
from voyage_admin.middleware.monitoring import record_auth_failure
from voyage_admin.schemas.admin_user import AdminProfile

_bearer_scheme = HTTPBearer(auto_error=False)


class AdminContext(NamedTuple):
    """Resolved admin identity, populated by :func:`get_admin_context`."""
    profile: AdminProfile     # fresh from the directory, not the client snapshot
    access_token: str         # provider session token presented by the caller


# ---------------------------------------------------------------------------
# Service wiring
# ---------------------------------------------------------------------------

def get_admin_auth(request: Request, db: Session = Depends(get_db)) -> AdminAuth:
    """Per-request AdminAuth.

    The session store is request-local: the HTTP client, not the server, is
    the durable holder of the session returned by ``POST /auth/login``.
    """
    return build_admin_auth(
        db,
        session_store=MemorySessionStore(),
        user_agent=request.headers.get("user-agent"),
        ip_address=request.client.host if request.client else None,
    )


def raise_for_error(error: AuthError) -> NoReturn:
    """Translate an AuthError kind into an HTTP error response."""
    detail = {"error": error.code, "message": error.message}
    if settings.is_development and error.detail:
        detail["debug"] = error.detail

    headers = {"WWW-Authenticate": "Bearer"} if error.status_code == status.HTTP_401_UNAUTHORIZED else None
    raise HTTPException(status_code=error.status_code, detail=detail, headers=headers)


# ---------------------------------------------------------------------------
# get_admin_context: bearer token → active profile
# ---------------------------------------------------------------------------

def get_admin_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    auth: AdminAuth = Depends(get_admin_auth),
) -> AdminContext:
    """Require a valid session token belonging to an active administrator."""
    if not credentials:
        record_auth_failure("missing")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "not_authenticated", "message": "Authentication required. Provide Authorization: Bearer <token>."},
            headers={"WWW-Authenticate": "Bearer"},
        )

    result = auth.verify_access_token(credentials.credentials)
    if not result.success:
        record_auth_failure(result.error.code)
        raise_for_error(result.error)

    return AdminContext(profile=result.user, access_token=credentials.credentials)


def get_current_admin(ctx: AdminContext = Depends(get_admin_context)) -> AdminProfile:
    return ctx.profile


# ---------------------------------------------------------------------------
# require_permission factory
# ---------------------------------------------------------------------------

def require_permission(permission: str) -> Callable:
    """Return a FastAPI dependency that enforces one permission tag.

    Usage::

        @router.get("/inquiries")
        def list_inquiries(admin: AdminProfile = Depends(require_permission("inquiries:read"))):
            ...
    """

    def _permission_dep(
        ctx: AdminContext = Depends(get_admin_context),
        auth: AdminAuth = Depends(get_admin_auth),
    ) -> AdminProfile:
        if not auth.has_permission(ctx.profile, permission):
            record_auth_failure("forbidden")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={"error": "forbidden", "message": f"Permission '{permission}' required"},
            )
        return ctx.profile

    # Give FastAPI a unique name so it doesn't collapse distinct dependencies
    _permission_dep.__name__ = f"require_permission_{permission.replace(':', '_')}"
    return _permission_dep


def require_super_admin(ctx: AdminContext = Depends(get_admin_context)) -> AdminProfile:
    """Only ``super_admin`` may manage administrators."""
    if ctx.profile.role != "super_admin":
        record_auth_failure("forbidden")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"error": "forbidden", "message": "Super admin role required"},
        )
    return ctx.profile
