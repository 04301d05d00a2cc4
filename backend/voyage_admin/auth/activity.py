"""Activity log sink over ``admin_activity_log``"""
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from voyage_admin.models.activity_log import AdminActivityLog
from voyage_admin.schemas.activity_log import ActivityLogEntry, ActivityLogResponse


class ActivityLog:
    """Append-only insert plus a filtered read for the admin screens.

    ``record`` raises on failure; callers that treat logging as best-effort
    catch around it.
    """

    def __init__(self, db: Session):
        self.db = db

    def record(self, entry: ActivityLogEntry) -> None:
        try:
            self.db.add(AdminActivityLog(**entry.model_dump()))
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def query(
        self,
        admin_user_id: Optional[str] = None,
        action: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[ActivityLogResponse]:
        query = self.db.query(AdminActivityLog)
        if admin_user_id:
            query = query.filter(AdminActivityLog.admin_user_id == admin_user_id)
        if action:
            query = query.filter(AdminActivityLog.action == action)

        rows = (
            query.order_by(AdminActivityLog.created_at.desc(), AdminActivityLog.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return [ActivityLogResponse.model_validate(row) for row in rows]
