"""Built-in identity provider backed by the ``identity_users`` table"""
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from voyage_admin.auth.identity import ProviderAuth, ProviderError, ProviderUser
from voyage_admin.models.identity_user import IdentityUser
from voyage_admin.models.revoked_token import RevokedToken
from voyage_admin.schemas.admin_user import normalize_email
from voyage_admin.schemas.session import ProviderSession
from voyage_admin.utils.jwt_utils import TokenError, create_access_token, decode_access_token, read_claims
from voyage_admin.utils.logger import logger
from voyage_admin.utils.passwords import hash_password, verify_password

# Compared against when the email is unknown so both failure paths cost one bcrypt check
_dummy_hash: Optional[str] = None


def _get_dummy_hash() -> str:
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = hash_password("not-a-real-password")
    return _dummy_hash


class LocalIdentityProvider:
    """Email/password identities with bcrypt hashes and RS256-signed session tokens.

    Sign-out adds the session's ``jti`` to ``revoked_tokens``; ``get_user`` and
    every later verification reject revoked tokens.
    """

    def __init__(self, db: Session, session_lifetime: int):
        self.db = db
        self.session_lifetime = session_lifetime

    def sign_in_with_password(self, email: str, password: str) -> ProviderAuth:
        user = self.db.query(IdentityUser).filter(IdentityUser.email == normalize_email(email)).first()

        if user is None:
            verify_password(password, _get_dummy_hash())
            raise ProviderError("Invalid login credentials", status_code=400)

        if not verify_password(password, user.password_hash):
            raise ProviderError("Invalid login credentials", status_code=400)

        if user.email_confirmed_at is None:
            raise ProviderError("Email not confirmed", status_code=400)

        token = create_access_token(
            subject=user.id,
            extra_claims={"email": user.email},
            expires_in=self.session_lifetime,
        )

        user.last_sign_in_at = datetime.utcnow()
        self.db.commit()

        return ProviderAuth(
            user=ProviderUser(id=user.id, email=user.email),
            session=ProviderSession(
                access_token=token,
                expires_in=self.session_lifetime,
                expires_at=read_claims(token)["exp"],
            ),
        )

    def sign_out(self, session: Optional[ProviderSession]) -> None:
        if session is None:
            return

        try:
            payload = decode_access_token(session.access_token, self.db)
        except TokenError:
            # Expired or already revoked: nothing left to invalidate
            return

        expires_at = datetime.fromtimestamp(payload["exp"], tz=timezone.utc).replace(tzinfo=None)
        try:
            self.db.add(RevokedToken(jti=payload["jti"], expires_at=expires_at))
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise ProviderError(f"Could not revoke session: {exc}") from exc

        logger.info("Session revoked", extra={"user_id": payload["sub"], "action": "sign_out"})

    def get_user(self, access_token: str) -> ProviderUser:
        try:
            payload = decode_access_token(access_token, self.db)
        except TokenError as exc:
            raise ProviderError(str(exc), status_code=401) from exc

        user = self.db.query(IdentityUser).filter(IdentityUser.id == payload["sub"]).first()
        if user is None:
            raise ProviderError("User not found", status_code=401)
        return ProviderUser(id=user.id, email=user.email)

    def create_user(self, email: str, password: str, email_confirm: bool = True) -> ProviderUser:
        email = normalize_email(email)
        existing = self.db.query(IdentityUser).filter(IdentityUser.email == email).first()
        if existing:
            raise ProviderError("A user with this email address has already been registered", status_code=422)

        user = IdentityUser(
            email=email,
            password_hash=hash_password(password),
            email_confirmed_at=datetime.utcnow() if email_confirm else None,
        )
        try:
            self.db.add(user)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise ProviderError(f"Could not create identity: {exc}") from exc

        self.db.refresh(user)
        return ProviderUser(id=user.id, email=user.email)

    def delete_user(self, user_id: str) -> None:
        user = self.db.query(IdentityUser).filter(IdentityUser.id == user_id).first()
        if user is None:
            raise ProviderError("User not found", status_code=404)

        try:
            self.db.delete(user)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise ProviderError(f"Could not delete identity: {exc}") from exc
