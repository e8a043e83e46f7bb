from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import select, or_

from orgtasks.access_control.models import TaskScope
from orgtasks.storage.models import TaskModel
from .base import BaseRepository

SORTABLE_FIELDS = {
    "created_at": TaskModel.created_at,
    "updated_at": TaskModel.updated_at,
    "due_date": TaskModel.due_date,
    "priority": TaskModel.priority,
    "title": TaskModel.title,
    "sort_order": TaskModel.sort_order,
}


class TaskRepository(BaseRepository[TaskModel]):
    """Repository for Tasks. Access scoping is applied from a TaskScope, never decided here."""

    model = TaskModel

    def list_scoped(
        self,
        session: Session,
        scope: TaskScope,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        category: Optional[str] = None,
        search: Optional[str] = None,
        sort_by: str = "created_at",
        descending: bool = True,
        limit: int = 10,
        offset: int = 0,
    ) -> List[TaskModel]:
        stmt = select(TaskModel)

        if scope.owner_id is not None:
            stmt = stmt.where(TaskModel.owner_id == scope.owner_id)
        else:
            stmt = stmt.where(TaskModel.organization_id.in_(sorted(scope.organization_ids or ())))

        if status:
            stmt = stmt.where(TaskModel.status == status)
        if priority:
            stmt = stmt.where(TaskModel.priority == priority)
        if category:
            stmt = stmt.where(TaskModel.category == category)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(or_(TaskModel.title.ilike(pattern), TaskModel.description.ilike(pattern)))

        column = SORTABLE_FIELDS[sort_by]
        stmt = stmt.order_by(column.desc() if descending else column.asc(), TaskModel.id)
        stmt = stmt.limit(limit).offset(offset)
        return list(session.scalars(stmt).all())
