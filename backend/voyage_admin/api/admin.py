"""Admin user management and activity log endpoints (super_admin only)"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from voyage_admin.api.deps import get_admin_auth, raise_for_error, require_super_admin
from voyage_admin.auth.activity import ActivityLog
from voyage_admin.auth.directory import AdminDirectory, DirectoryError
from voyage_admin.auth.service import AdminAuth
from voyage_admin.config import settings
from voyage_admin.database import get_db
from voyage_admin.middleware.rate_limit import get_rate_limit, limiter
from voyage_admin.schemas.activity_log import ActivityLogResponse
from voyage_admin.schemas.admin_user import AdminProfile, AdminUserCreate, AdminUserResponse
from voyage_admin.utils.logger import logger

router = APIRouter(prefix="/admin", tags=["admin"])


def _directory_unavailable(action: str, exc: DirectoryError) -> HTTPException:
    logger.error(
        f"Admin directory error during {action}: {exc}" if settings.is_development else f"Admin directory error during {action}",
        extra={"action": action},
    )
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail={"error": "directory_unavailable", "message": "Admin directory is unavailable. Please try again."},
    )


# ---------------------------------------------------------------------------
# Admin user CRUD
# ---------------------------------------------------------------------------

@router.post("/users", response_model=AdminProfile, status_code=status.HTTP_201_CREATED)
@limiter.limit(get_rate_limit("admin_create"))
def create_admin_user(
    request: Request,
    data: AdminUserCreate,
    admin: AdminProfile = Depends(require_super_admin),
    auth: AdminAuth = Depends(get_admin_auth),
):
    """
    Create an administrator (super_admin only).

    Provisions the login identity with a pre-confirmed email, then the admin
    profile. If the profile cannot be written the identity is removed again.
    """
    result = auth.create_admin_user(data, created_by=admin.id)
    if not result.success:
        raise_for_error(result.error)
    return result.user


@router.get("/users", response_model=List[AdminUserResponse])
def list_admin_users(
    db: Session = Depends(get_db),
    _: AdminProfile = Depends(require_super_admin),
):
    """List all administrators, newest first (super_admin only)."""
    try:
        return AdminDirectory(db).list_all()
    except DirectoryError as exc:
        raise _directory_unavailable("list_users", exc) from exc


@router.delete("/users/{admin_id}", status_code=status.HTTP_204_NO_CONTENT)
def deactivate_admin_user(
    admin_id: str,
    db: Session = Depends(get_db),
    admin: AdminProfile = Depends(require_super_admin),
    auth: AdminAuth = Depends(get_admin_auth),
):
    """Deactivate (soft-delete) an administrator (super_admin only).

    The change takes effect on the target's next request: bearer sessions are
    re-checked against the directory every time.
    """
    if admin_id == admin.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "invalid_request", "message": "You cannot deactivate your own account"},
        )

    try:
        deactivated = AdminDirectory(db).deactivate(admin_id)
    except DirectoryError as exc:
        raise _directory_unavailable("deactivate_user", exc) from exc

    if not deactivated:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "not_found", "message": f"Admin user {admin_id} not found"},
        )

    auth.record_activity(
        admin.id,
        "deactivate_user",
        table_name="admin_users",
        record_id=admin_id,
        new_values={"is_active": False},
    )
    logger.info(f"Deactivated admin user: {admin_id}", extra={"admin_id": admin.id, "action": "deactivate_user"})
    return None


# ---------------------------------------------------------------------------
# Activity log
# ---------------------------------------------------------------------------

@router.get("/activity", response_model=List[ActivityLogResponse])
def query_activity(
    admin_user_id: Optional[str] = Query(None, description="Filter by acting administrator"),
    action: Optional[str] = Query(None, description="Filter by action, e.g. login"),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    _: AdminProfile = Depends(require_super_admin),
):
    """Query the admin activity trail, newest first (super_admin only)."""
    return ActivityLog(db).query(admin_user_id=admin_user_id, action=action, limit=limit, offset=offset)
