"""Authentication error kinds returned by AdminAuth"""
from typing import Optional


class AuthError(Exception):
    """Generic authentication failure.

    ``message`` is always safe to show to the user. ``detail`` carries the
    underlying cause and is only populated in development deployments.
    """

    code = "auth_error"
    status_code = 500
    default_message = "Authentication failed"

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)


class InvalidCredentials(AuthError):
    """Provider rejected the email/password. Never says which one was wrong."""

    code = "invalid_credentials"
    status_code = 401
    default_message = "Invalid email or password"


class AccessDenied(AuthError):
    """The identity is valid but has no active administrative profile."""

    code = "access_denied"
    status_code = 403
    default_message = "Access denied. Admin account required."


class ProvisioningFailed(AuthError):
    """Creating a new administrator failed at the provider or directory step."""

    code = "provisioning_failed"
    status_code = 400
    default_message = "Failed to create user"
