"""Pydantic schemas for request/response validation"""
from voyage_admin.schemas.activity_log import ActivityLogEntry, ActivityLogResponse
from voyage_admin.schemas.admin_user import (
    VALID_ROLES,
    AdminProfile,
    AdminUserCreate,
    AdminUserResponse,
    PermissionsResponse,
)
from voyage_admin.schemas.session import LoginRequest, LoginResponse, ProviderSession, StoredSession

__all__ = [
    "VALID_ROLES",
    "AdminProfile",
    "AdminUserCreate",
    "AdminUserResponse",
    "PermissionsResponse",
    "ActivityLogEntry",
    "ActivityLogResponse",
    "LoginRequest",
    "LoginResponse",
    "ProviderSession",
    "StoredSession",
]
