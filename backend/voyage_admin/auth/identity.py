"""Identity provider contract.

AdminAuth never checks passwords itself; it delegates to an identity provider
and only trusts the user id the provider hands back. Implementations raise
``ProviderError`` for every failure so callers have one thing to catch.
"""
from dataclasses import dataclass
from typing import Optional, Protocol

from sqlalchemy.orm import Session

from voyage_admin.config import Settings, settings
from voyage_admin.schemas.session import ProviderSession


class ProviderError(Exception):
    """Identity provider rejected a request or could not be reached"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


@dataclass(frozen=True)
class ProviderUser:
    id: str
    email: str


@dataclass(frozen=True)
class ProviderAuth:
    """Result of a successful password sign-in"""
    user: ProviderUser
    session: ProviderSession


class IdentityProvider(Protocol):
    def sign_in_with_password(self, email: str, password: str) -> ProviderAuth: ...

    def sign_out(self, session: Optional[ProviderSession]) -> None: ...

    def get_user(self, access_token: str) -> ProviderUser: ...

    def create_user(self, email: str, password: str, email_confirm: bool = True) -> ProviderUser: ...

    def delete_user(self, user_id: str) -> None: ...


def get_identity_provider(db: Session, config: Settings = settings) -> IdentityProvider:
    """Build the provider selected by ``IDENTITY_PROVIDER``."""
    if config.IDENTITY_PROVIDER == "gotrue":
        from voyage_admin.auth.gotrue import GoTrueIdentityProvider
        return GoTrueIdentityProvider.from_settings(config)

    if config.IDENTITY_PROVIDER == "local":
        from voyage_admin.auth.local_provider import LocalIdentityProvider
        return LocalIdentityProvider(db, session_lifetime=config.SESSION_LIFETIME_SECONDS)

    raise ValueError(f"Unknown IDENTITY_PROVIDER: {config.IDENTITY_PROVIDER!r}")
