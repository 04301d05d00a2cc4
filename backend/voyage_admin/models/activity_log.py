"""Admin activity log model"""
from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, JSON, String, Text

from voyage_admin.database import Base


class AdminActivityLog(Base):
    """Append-only record of administrator actions (logins, user provisioning, edits)"""

    __tablename__ = "admin_activity_log"

    id = Column(Integer, primary_key=True, index=True)
    admin_user_id = Column(String(36), nullable=False, index=True)
    action = Column(String(100), nullable=False, index=True)   # login, create_user, deactivate_user, ...
    table_name = Column(String(100), nullable=True)
    record_id = Column(String(36), nullable=True)
    new_values = Column(JSON, nullable=True)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
