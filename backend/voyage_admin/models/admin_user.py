"""AdminUser: administrative profiles linked to identity provider accounts"""
import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, String

from voyage_admin.database import Base


def generate_uuid_string():
    """Generate UUID as string for SQLite compatibility"""
    return str(uuid.uuid4())


class AdminUser(Base):
    """A dashboard administrator.

    ``user_id`` references the identity provider's account; the provider owns the
    credentials, this row owns the role and the ``is_active`` gate. An inactive row
    is treated as if it did not exist for every authorization decision.
    """

    __tablename__ = "admin_users"

    id = Column(String(36), primary_key=True, default=generate_uuid_string)
    user_id = Column(String(36), unique=True, nullable=False, index=True)      # provider user id
    email = Column(String(255), nullable=False, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    role = Column(String(20), nullable=False)                                   # super_admin|content_manager|staff
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    last_login = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    created_by = Column(String(36), nullable=True)                              # admin_users.id of the creator
