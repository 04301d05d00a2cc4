"""IdentityUser: accounts owned by the built-in identity provider"""
from datetime import datetime

from sqlalchemy import Column, DateTime, String

from voyage_admin.database import Base
from voyage_admin.models.admin_user import generate_uuid_string


class IdentityUser(Base):
    """Email/password identity used by ``LocalIdentityProvider``.

    Only the bcrypt hash of the password is stored. Rows here carry no
    administrative capability on their own; see ``AdminUser``.
    """

    __tablename__ = "identity_users"

    id = Column(String(36), primary_key=True, default=generate_uuid_string)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    email_confirmed_at = Column(DateTime, nullable=True)  # null = unconfirmed, cannot sign in
    last_sign_in_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
