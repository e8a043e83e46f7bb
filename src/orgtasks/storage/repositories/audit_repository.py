from datetime import datetime
from typing import Optional, Dict, Any, List, Tuple
from sqlalchemy import select, func
from sqlalchemy.orm import Session

from orgtasks.storage.repositories.base import BaseRepository
from orgtasks.storage.models import UserModel
from orgtasks.storage.models_audit import AuditLogModel

SORTABLE_COLUMNS = {
    "timestamp": AuditLogModel.timestamp,
    "action": AuditLogModel.action,
    "resource": AuditLogModel.resource,
    "user_id": AuditLogModel.user_id,
    "resource_id": AuditLogModel.resource_id,
    "success": AuditLogModel.success,
}

GROUPABLE_COLUMNS = {
    "action": AuditLogModel.action,
    "resource": AuditLogModel.resource,
}


class AuditRepository(BaseRepository[AuditLogModel]):
    """Repository for Audit Logs. Entries are append-only."""

    model = AuditLogModel

    def update(self, session: Session, id: str, updates: Dict[str, Any]) -> Optional[AuditLogModel]:
        raise NotImplementedError("audit log entries are append-only")

    def delete(self, session: Session, id: str) -> bool:
        raise NotImplementedError("audit log entries are append-only")

    def query(
        self,
        session: Session,
        user_id: Optional[str] = None,
        action: Optional[str] = None,
        resource: Optional[str] = None,
        resource_id: Optional[str] = None,
        success: Optional[bool] = None,
        search: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        sort_by: str = "timestamp",
        descending: bool = True,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Tuple[AuditLogModel, Optional[UserModel]]], int]:
        """
        Filter, sort and page audit entries.

        Returns:
            The requested page as (entry, user) pairs, and the total number of
            matching entries. The user is None once the account is gone.
        """
        conditions = []
        if user_id:
            conditions.append(AuditLogModel.user_id == user_id)
        if action:
            conditions.append(AuditLogModel.action == action)
        if resource:
            conditions.append(AuditLogModel.resource == resource)
        if resource_id:
            conditions.append(AuditLogModel.resource_id == resource_id)
        if success is not None:
            conditions.append(AuditLogModel.success == success)
        if search:
            conditions.append(AuditLogModel.error_message.ilike(f"%{search}%"))
        if start is not None:
            conditions.append(AuditLogModel.timestamp >= start)
        if end is not None:
            conditions.append(AuditLogModel.timestamp <= end)

        total = session.scalar(select(func.count()).select_from(AuditLogModel).where(*conditions))

        column = SORTABLE_COLUMNS[sort_by]
        stmt = (
            select(AuditLogModel, UserModel)
            .outerjoin(UserModel, UserModel.id == AuditLogModel.user_id)
            .where(*conditions)
            .order_by(column.desc() if descending else column.asc(), AuditLogModel.id)
            .limit(limit)
            .offset(offset)
        )
        return [(log, user) for log, user in session.execute(stmt).all()], total or 0

    def count(self, session: Session, success: Optional[bool] = None) -> int:
        stmt = select(func.count()).select_from(AuditLogModel)
        if success is not None:
            stmt = stmt.where(AuditLogModel.success == success)
        return session.scalar(stmt) or 0

    def count_by(self, session: Session, group_by: str) -> Dict[str, int]:
        column = GROUPABLE_COLUMNS[group_by]
        stmt = select(column, func.count()).group_by(column)
        return {key: count for key, count in session.execute(stmt).all()}
