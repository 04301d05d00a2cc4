"""Admin directory: the ``admin_users`` table as seen by AdminAuth"""
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from voyage_admin.models.admin_user import AdminUser
from voyage_admin.schemas.admin_user import AdminProfile, AdminUserResponse


class DirectoryError(Exception):
    """A directory read or write failed"""


class AdminDirectory:
    """Point lookups, inserts and single-row updates over ``admin_users``.

    Every database failure surfaces as ``DirectoryError`` after a rollback.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_active_by_user_id(self, user_id: str) -> Optional[AdminProfile]:
        """Active profile linked to a provider user id, or None"""
        try:
            row = self.db.query(AdminUser).filter(
                AdminUser.user_id == user_id,
                AdminUser.is_active == True,
            ).first()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise DirectoryError(str(exc)) from exc
        return AdminProfile.model_validate(row) if row else None

    def get(self, admin_id: str) -> Optional[AdminUserResponse]:
        try:
            row = self.db.query(AdminUser).filter(AdminUser.id == admin_id).first()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise DirectoryError(str(exc)) from exc
        return AdminUserResponse.model_validate(row) if row else None

    def list_all(self) -> List[AdminUserResponse]:
        try:
            rows = self.db.query(AdminUser).order_by(AdminUser.created_at.desc()).all()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise DirectoryError(str(exc)) from exc
        return [AdminUserResponse.model_validate(row) for row in rows]

    def touch_last_login(self, admin_id: str, when: datetime) -> None:
        try:
            self.db.query(AdminUser).filter(AdminUser.id == admin_id).update({"last_login": when})
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise DirectoryError(str(exc)) from exc

    def insert(
        self,
        user_id: str,
        email: str,
        first_name: str,
        last_name: str,
        role: str,
        created_by: Optional[str],
    ) -> AdminProfile:
        row = AdminUser(
            user_id=user_id,
            email=email,
            first_name=first_name,
            last_name=last_name,
            role=role,
            is_active=True,
            created_by=created_by,
        )
        try:
            self.db.add(row)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise DirectoryError(str(exc)) from exc

        self.db.refresh(row)
        return AdminProfile.model_validate(row)

    def deactivate(self, admin_id: str) -> bool:
        """Soft-delete a profile. Returns False if it does not exist."""
        try:
            row = self.db.query(AdminUser).filter(AdminUser.id == admin_id).first()
            if row is None:
                return False
            row.is_active = False
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise DirectoryError(str(exc)) from exc
        return True
