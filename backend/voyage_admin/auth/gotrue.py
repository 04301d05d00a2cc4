"""Identity provider client for a Supabase / GoTrue auth server"""
from typing import Any, Dict, Optional

import requests

from voyage_admin.auth.identity import ProviderAuth, ProviderError, ProviderUser
from voyage_admin.config import Settings
from voyage_admin.schemas.session import ProviderSession


class GoTrueIdentityProvider:
    """Talks to ``/auth/v1`` of a GoTrue server over HTTP.

    Sign-in, sign-out and token lookups use the public (anon) key; creating and
    deleting users requires the service-role key.
    """

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        service_role_key: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/") + "/auth/v1"
        self.anon_key = anon_key
        self.service_role_key = service_role_key
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, config: Settings) -> "GoTrueIdentityProvider":
        if not config.GOTRUE_URL or not config.GOTRUE_ANON_KEY:
            raise ValueError("GOTRUE_URL and GOTRUE_ANON_KEY are required when IDENTITY_PROVIDER=gotrue")
        return cls(
            base_url=config.GOTRUE_URL,
            anon_key=config.GOTRUE_ANON_KEY,
            service_role_key=config.GOTRUE_SERVICE_ROLE_KEY,
            timeout=config.IDENTITY_PROVIDER_TIMEOUT,
        )

    # ---------------------------------------------------------------------------
    # HTTP plumbing
    # ---------------------------------------------------------------------------

    def _headers(self, bearer: Optional[str] = None, admin: bool = False) -> Dict[str, str]:
        key = self.anon_key
        if admin:
            if not self.service_role_key:
                raise ProviderError("GOTRUE_SERVICE_ROLE_KEY is required for user administration")
            key = self.service_role_key
        return {
            "apikey": key,
            "Authorization": f"Bearer {bearer or key}",
            "Content-Type": "application/json",
        }

    def _request(self, method: str, path: str, headers: Dict[str, str], **kwargs: Any) -> Dict[str, Any]:
        try:
            response = self.session.request(
                method,
                f"{self.base_url}{path}",
                headers=headers,
                timeout=self.timeout,
                **kwargs,
            )
        except requests.RequestException as exc:
            raise ProviderError(f"Identity provider unreachable: {exc}") from exc

        if response.status_code >= 400:
            try:
                body = response.json()
                message = body.get("msg") or body.get("error_description") or body.get("message") or response.text
            except ValueError:
                message = response.text
            raise ProviderError(message, status_code=response.status_code)

        if not response.content:
            return {}
        return response.json()

    @staticmethod
    def _user(data: Dict[str, Any]) -> ProviderUser:
        return ProviderUser(id=data["id"], email=data.get("email", ""))

    # ---------------------------------------------------------------------------
    # IdentityProvider
    # ---------------------------------------------------------------------------

    def sign_in_with_password(self, email: str, password: str) -> ProviderAuth:
        data = self._request(
            "POST",
            "/token?grant_type=password",
            self._headers(),
            json={"email": email, "password": password},
        )
        if not data.get("user") or not data.get("access_token"):
            raise ProviderError("Authentication failed")

        return ProviderAuth(
            user=self._user(data["user"]),
            session=ProviderSession(
                access_token=data["access_token"],
                token_type=data.get("token_type", "bearer"),
                expires_in=data.get("expires_in"),
                expires_at=data.get("expires_at"),
                refresh_token=data.get("refresh_token"),
            ),
        )

    def sign_out(self, session: Optional[ProviderSession]) -> None:
        if session is None:
            return
        self._request("POST", "/logout", self._headers(bearer=session.access_token))

    def get_user(self, access_token: str) -> ProviderUser:
        return self._user(self._request("GET", "/user", self._headers(bearer=access_token)))

    def create_user(self, email: str, password: str, email_confirm: bool = True) -> ProviderUser:
        data = self._request(
            "POST",
            "/admin/users",
            self._headers(admin=True),
            json={"email": email, "password": password, "email_confirm": email_confirm},
        )
        # Older GoTrue versions wrap the user object
        return self._user(data.get("user", data))

    def delete_user(self, user_id: str) -> None:
        self._request("DELETE", f"/admin/users/{user_id}", self._headers(admin=True))
