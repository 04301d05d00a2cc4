"""Client-held session schemas"""
from typing import Optional

from pydantic import BaseModel

from voyage_admin.schemas.admin_user import AdminProfile


class ProviderSession(BaseModel):
    """Opaque credential issued by the identity provider at sign-in"""

    access_token: str
    token_type: str = "bearer"
    expires_in: Optional[int] = None   # seconds
    expires_at: Optional[int] = None   # epoch seconds
    refresh_token: Optional[str] = None


class StoredSession(BaseModel):
    """The record persisted under ``SESSION_STORAGE_KEY`` after a successful login.

    ``user`` is a snapshot taken at login and is not refreshed afterwards.
    ``login_time`` is epoch milliseconds.
    """

    user: AdminProfile
    login_time: int
    provider_session: Optional[ProviderSession] = None


class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(BaseModel):
    success: bool = True
    user: AdminProfile
    session: StoredSession
