"""Administrator authentication: login, sessions, permissions, provisioning."""
from voyage_admin.auth.errors import AccessDenied, AuthError, InvalidCredentials, ProvisioningFailed
from voyage_admin.auth.identity import IdentityProvider, ProviderAuth, ProviderError, ProviderUser
from voyage_admin.auth.permissions import ROLE_PERMISSIONS, WILDCARD, has_permission
from voyage_admin.auth.service import AdminAuth, AuthResult, build_admin_auth
from voyage_admin.auth.session_store import FileSessionStore, MemorySessionStore, NullSessionStore, get_session_store

__all__ = [
    "AdminAuth",
    "AuthResult",
    "build_admin_auth",
    "AuthError",
    "InvalidCredentials",
    "AccessDenied",
    "ProvisioningFailed",
    "IdentityProvider",
    "ProviderAuth",
    "ProviderError",
    "ProviderUser",
    "ROLE_PERMISSIONS",
    "WILDCARD",
    "has_permission",
    "FileSessionStore",
    "MemorySessionStore",
    "NullSessionStore",
    "get_session_store",
]
