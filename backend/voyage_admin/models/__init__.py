"""Database models"""
from voyage_admin.models.activity_log import AdminActivityLog
from voyage_admin.models.admin_user import AdminUser
from voyage_admin.models.identity_user import IdentityUser
from voyage_admin.models.revoked_token import RevokedToken

__all__ = ["AdminActivityLog", "AdminUser", "IdentityUser", "RevokedToken"]
