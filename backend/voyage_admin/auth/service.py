"""AdminAuth: administrator login, client session, permissions and provisioning.

Every public method returns normally. Failures come back as an
``AuthResult`` carrying one of the ``AuthError`` kinds, or as ``None`` /
``False`` for the read-only helpers. Logging the activity trail and bumping
``last_login`` are best-effort: they are attempted, and a failure is logged
and dropped without touching the caller's result.
"""
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from sqlalchemy.orm import Session

from voyage_admin.auth.activity import ActivityLog
from voyage_admin.auth.directory import AdminDirectory, DirectoryError
from voyage_admin.auth.errors import AccessDenied, AuthError, InvalidCredentials, ProvisioningFailed
from voyage_admin.auth.identity import IdentityProvider, ProviderError, get_identity_provider
from voyage_admin.auth.permissions import HasRole, has_permission
from voyage_admin.auth.session_store import NullSessionStore, SessionStore
from voyage_admin.config import Settings, settings
from voyage_admin.schemas.activity_log import ActivityLogEntry
from voyage_admin.schemas.admin_user import AdminProfile, AdminUserCreate, normalize_email
from voyage_admin.schemas.session import ProviderSession, StoredSession
from voyage_admin.utils.logger import logger


@dataclass(frozen=True)
class AuthResult:
    user: Optional[AdminProfile] = None
    error: Optional[AuthError] = None

    @property
    def success(self) -> bool:
        return self.error is None


class AdminAuth:
    """Authentication service for dashboard administrators.

    Build one per client context (see :func:`build_admin_auth`) and pass it to
    whatever needs it. The session store is that client's durable storage;
    nothing else in this object is mutable.
    """

    def __init__(
        self,
        provider: IdentityProvider,
        directory: AdminDirectory,
        activity_log: ActivityLog,
        session_store: Optional[SessionStore] = None,
        *,
        config: Settings = settings,
        user_agent: Optional[str] = None,
        ip_address: Optional[str] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.provider = provider
        self.directory = directory
        self.activity_log = activity_log
        self.session_store = session_store if session_store is not None else NullSessionStore()
        self.config = config
        self.storage_key = config.SESSION_STORAGE_KEY
        self.session_lifetime_ms = config.SESSION_LIFETIME_SECONDS * 1000
        self.user_agent = user_agent
        self.ip_address = ip_address
        self.clock = clock

    # ---------------------------------------------------------------------------
    # Login / session
    # ---------------------------------------------------------------------------

    def login(self, email: str, password: str) -> AuthResult:
        """Sign in with the identity provider and open a local admin session.

        Steps run in order: provider sign-in, active-profile lookup, last-login
        update, session write, activity entry.
        """
        if not email or not password:
            return AuthResult(error=InvalidCredentials())

        if not self._storage_available():
            return AuthResult(error=AuthError("Login failed. Please try again.",
                                              detail=self._detail("session storage unavailable")))

        try:
            try:
                auth = self.provider.sign_in_with_password(email, password)
            except ProviderError as exc:
                self._report("Provider rejected sign-in", exc)
                return AuthResult(error=InvalidCredentials())

            try:
                profile = self.directory.find_active_by_user_id(auth.user.id)
            except DirectoryError as exc:
                self._report("Admin directory lookup failed", exc)
                self._sign_out_quietly(auth.session)
                return AuthResult(error=AuthError("Login failed. Please try again.", detail=self._detail(exc)))

            if profile is None:
                logger.info("Sign-in without active admin profile", extra={"user_id": auth.user.id, "action": "login"})
                self._sign_out_quietly(auth.session)
                return AuthResult(error=AccessDenied())

            self._touch_last_login(profile.id)

            session = StoredSession(user=profile, login_time=self._now_ms(), provider_session=auth.session)
            try:
                self.session_store.set(self.storage_key, session.model_dump_json())
            except Exception as exc:
                self._report("Could not store admin session", exc)
                self._sign_out_quietly(auth.session)
                return AuthResult(error=AuthError("Login failed. Please try again.", detail=self._detail(exc)))

            self._log_activity(profile.id, "login")

            logger.info("Admin logged in", extra={"admin_id": profile.id, "role": profile.role, "action": "login"})
            return AuthResult(user=profile)

        except Exception as exc:
            self._report("Login error", exc)
            return AuthResult(error=AuthError("Login failed. Please try again.", detail=self._detail(exc)))

    def current_session(self) -> Optional[StoredSession]:
        """The stored session if one exists and has not expired.

        An expired session is torn down (same as :meth:`logout`) before
        returning None. No network call is made for a live session.
        """
        if not self._storage_available():
            return None

        try:
            raw = self.session_store.get(self.storage_key)
            if not raw:
                return None
            session = StoredSession.model_validate_json(raw)
        except Exception as exc:
            self._report("Unreadable admin session", exc, level="debug")
            return None

        if self._now_ms() - session.login_time > self.session_lifetime_ms:
            logger.info("Admin session expired", extra={"admin_id": session.user.id, "action": "session_expired"})
            self.logout()
            return None

        return session

    def get_current_user(self) -> Optional[AdminProfile]:
        session = self.current_session()
        return session.user if session else None

    def logout(self) -> None:
        """Drop the local session, then ask the provider to end its side.

        The local record is removed first and regardless of what the provider
        does afterwards.
        """
        provider_session: Optional[ProviderSession] = None

        if self._storage_available():
            try:
                raw = self.session_store.get(self.storage_key)
                if raw:
                    provider_session = StoredSession.model_validate_json(raw).provider_session
            except Exception as exc:
                self._report("Unreadable admin session during logout", exc, level="debug")

            try:
                self.session_store.remove(self.storage_key)
            except Exception as exc:
                self._report("Could not remove admin session", exc)

        self._sign_out_quietly(provider_session)

    def end_session(self, access_token: str) -> None:
        """Server-side logout for a client that keeps its session record itself.

        Best-effort: the provider session is ended if possible and a "logout"
        activity entry is written when the token still maps to an admin.
        """
        if not access_token:
            return

        result = self.verify_access_token(access_token)
        self._sign_out_quietly(ProviderSession(access_token=access_token))
        if result.success:
            self._log_activity(result.user.id, "logout")
            logger.info("Admin logged out", extra={"admin_id": result.user.id, "action": "logout"})

    def verify_access_token(self, access_token: str) -> AuthResult:
        """Resolve a provider access token to an active admin profile.

        Used on every privileged server-side request so that role and
        ``is_active`` come from the directory, never from a client-held snapshot.
        """
        if not access_token:
            return AuthResult(error=InvalidCredentials("Invalid or expired session"))

        try:
            try:
                identity = self.provider.get_user(access_token)
            except ProviderError as exc:
                self._report("Provider rejected access token", exc, level="debug")
                return AuthResult(error=InvalidCredentials("Invalid or expired session"))

            profile = self.directory.find_active_by_user_id(identity.id)
            if profile is None:
                return AuthResult(error=AccessDenied())
            return AuthResult(user=profile)

        except Exception as exc:
            self._report("Session verification error", exc)
            return AuthResult(error=AuthError("Session verification failed", detail=self._detail(exc)))

    # ---------------------------------------------------------------------------
    # Authorization
    # ---------------------------------------------------------------------------

    def has_permission(self, profile: Optional[HasRole], permission: str) -> bool:
        return has_permission(profile, permission)

    # ---------------------------------------------------------------------------
    # Provisioning
    # ---------------------------------------------------------------------------

    def create_admin_user(self, data: AdminUserCreate, created_by: str) -> AuthResult:
        """Provision a provider identity plus its admin profile.

        The caller is responsible for checking that ``created_by`` belongs to a
        super_admin. If the profile insert fails the new identity is deleted
        again so no identity is left without a profile.
        """
        email = normalize_email(data.email)
        try:
            try:
                identity = self.provider.create_user(email, data.password, email_confirm=True)
            except ProviderError as exc:
                self._report("Provider refused to create identity", exc)
                return AuthResult(error=ProvisioningFailed("Failed to create user account", detail=self._detail(exc)))

            try:
                profile = self.directory.insert(
                    user_id=identity.id,
                    email=email,
                    first_name=data.first_name,
                    last_name=data.last_name,
                    role=data.role,
                    created_by=created_by,
                )
            except Exception as exc:
                self._report("Admin record insert failed", exc)
                self._delete_identity_quietly(identity.id)
                return AuthResult(error=ProvisioningFailed("Failed to create admin record", detail=self._detail(exc)))

            self._log_activity(
                created_by,
                "create_user",
                table_name="admin_users",
                record_id=profile.id,
                new_values={"email": email, "role": data.role},
            )

            logger.info("Created admin user", extra={"admin_id": profile.id, "role": profile.role, "action": "create_user"})
            return AuthResult(user=profile)

        except Exception as exc:
            self._report("Create user error", exc)
            return AuthResult(error=AuthError("Failed to create user", detail=self._detail(exc)))

    def record_activity(
        self,
        admin_user_id: str,
        action: str,
        table_name: Optional[str] = None,
        record_id: Optional[str] = None,
        new_values: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Best-effort activity entry for actions performed outside this class."""
        self._log_activity(admin_user_id, action, table_name, record_id, new_values)

    # ---------------------------------------------------------------------------
    # Internals
    # ---------------------------------------------------------------------------

    def _now_ms(self) -> int:
        return int(self.clock() * 1000)

    def _storage_available(self) -> bool:
        try:
            return self.session_store.is_available()
        except Exception:
            return False

    def _detail(self, exc: Any) -> Optional[str]:
        return str(exc) if self.config.is_development else None

    def _report(self, message: str, exc: BaseException, level: str = "error") -> None:
        """Log a failure; the exception itself is only written in development."""
        if self.config.is_development:
            getattr(logger, level)(f"{message}: {exc}", exc_info=(level == "error"))
        else:
            getattr(logger, level)(message)

    def _sign_out_quietly(self, provider_session: Optional[ProviderSession]) -> None:
        try:
            self.provider.sign_out(provider_session)
        except Exception as exc:
            self._report("Provider sign-out failed", exc, level="warning")

    def _delete_identity_quietly(self, user_id: str) -> None:
        try:
            self.provider.delete_user(user_id)
        except Exception as exc:
            self._report("Compensating identity delete failed", exc)
            logger.error("Orphaned identity left after failed provisioning", extra={"user_id": user_id})

    def _touch_last_login(self, admin_id: str) -> None:
        try:
            when = datetime.fromtimestamp(self.clock(), tz=timezone.utc).replace(tzinfo=None)
            self.directory.touch_last_login(admin_id, when)
        except Exception as exc:
            self._report("Could not update last_login", exc, level="warning")

    def _log_activity(
        self,
        admin_user_id: str,
        action: str,
        table_name: Optional[str] = None,
        record_id: Optional[str] = None,
        new_values: Optional[Dict[str, Any]] = None,
    ) -> None:
        try:
            self.activity_log.record(ActivityLogEntry(
                admin_user_id=admin_user_id,
                action=action,
                table_name=table_name,
                record_id=record_id,
                new_values=new_values,
                ip_address=self.ip_address,
                user_agent=self.user_agent,
            ))
        except Exception as exc:
            self._report("Failed to log activity", exc, level="warning")


def build_admin_auth(
    db: Session,
    session_store: Optional[SessionStore] = None,
    user_agent: Optional[str] = None,
    ip_address: Optional[str] = None,
    config: Settings = settings,
) -> AdminAuth:
    """Wire AdminAuth to the configured provider and the relational store."""
    return AdminAuth(
        provider=get_identity_provider(db, config),
        directory=AdminDirectory(db),
        activity_log=ActivityLog(db),
        session_store=session_store,
        config=config,
        user_agent=user_agent,
        ip_address=ip_address,
    )
