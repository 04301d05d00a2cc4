"""AdminUser schemas"""
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, computed_field, field_validator

VALID_ROLES = ("super_admin", "content_manager", "staff")

Role = Literal["super_admin", "content_manager", "staff"]


def normalize_email(email: str) -> str:
    """Canonical form used for both identity and directory rows"""
    return email.strip().lower()


class AdminProfile(BaseModel):
    """Snapshot of an ``admin_users`` row as handed to callers and stored in sessions.

    ``role`` is a plain string so that rows carrying a role unknown to this
    release still load; permission checks treat unknown roles as having nothing.
    """

    id: str
    user_id: str
    email: str
    first_name: str
    last_name: str
    role: str
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @computed_field
    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @computed_field
    @property
    def initials(self) -> str:
        return f"{self.first_name[:1]}{self.last_name[:1]}".upper()


class AdminUserCreate(BaseModel):
    email: str = Field(..., min_length=3, max_length=255, description="Login email")
    password: str = Field(..., min_length=8, description="Initial password")
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    role: Role = Field(..., description="super_admin | content_manager | staff")

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return normalize_email(value)


class AdminUserResponse(AdminProfile):
    """Full directory row, including who provisioned it"""
    created_by: Optional[str] = None


class PermissionsResponse(BaseModel):
    role: str
    is_super_admin: bool
    permissions: List[str]
