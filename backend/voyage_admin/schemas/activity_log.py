"""Activity log schemas"""
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ActivityLogEntry(BaseModel):
    """An activity record to append; everything but the actor and action is optional"""

    admin_user_id: str
    action: str = Field(..., description="login, create_user, deactivate_user, ...")
    table_name: Optional[str] = None
    record_id: Optional[str] = None
    new_values: Optional[Dict[str, Any]] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


class ActivityLogResponse(ActivityLogEntry):
    id: int
    created_at: datetime

    class Config:
        from_attributes = True
