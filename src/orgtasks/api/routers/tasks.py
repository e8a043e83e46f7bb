"""
Router for Task endpoints.
"""

from contextlib import contextmanager
from typing import Annotated, Iterator, List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from orgtasks.api import schemas
from orgtasks.api.dependencies import get_task_service, get_db
from orgtasks.api.dependencies_auth import get_current_principal, get_audit_context
from orgtasks.access_control.exceptions import AccessDeniedError, ResourceNotFoundError
from orgtasks.access_control.models import Principal
from orgtasks.audit.schemas import AuditRequestContext
from orgtasks.engine.task_service import TaskService
from orgtasks.storage.models import TaskCategory, TaskPriority, TaskStatus

router = APIRouter()

SortField = Literal["created_at", "updated_at", "due_date", "priority", "title", "sort_order"]


@contextmanager
def _access_errors() -> Iterator[None]:
    try:
        yield
    except AccessDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.reason)
    except ResourceNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.reason)


@router.post("/", response_model=schemas.TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    task_create: schemas.TaskCreate,
    service: Annotated[TaskService, Depends(get_task_service)],
    session: Annotated[Session, Depends(get_db)],
    principal: Annotated[Principal, Depends(get_current_principal)],
    context: Annotated[AuditRequestContext, Depends(get_audit_context)],
):
    """
    Create a new Task in the caller's organization.
    """
    with _access_errors():
        return service.create_task(session, principal, task_create.model_dump(), context)


@router.get("/", response_model=List[schemas.TaskResponse])
def list_tasks(
    service: Annotated[TaskService, Depends(get_task_service)],
    session: Annotated[Session, Depends(get_db)],
    principal: Annotated[Principal, Depends(get_current_principal)],
    status_filter: Optional[TaskStatus] = Query(None, alias="status"),
    priority: Optional[TaskPriority] = None,
    category: Optional[TaskCategory] = None,
    search: Optional[str] = None,
    sort_by: SortField = "created_at",
    sort_order: Literal["ASC", "DESC"] = "DESC",
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
):
    """
    List tasks visible to the caller.
    Owners see their organization and its children, admins their organization,
    viewers only the tasks they own.
    """
    return service.list_tasks(
        session,
        principal,
        status=status_filter,
        priority=priority,
        category=category,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )


@router.patch("/bulk", response_model=List[schemas.TaskResponse])
def bulk_update_tasks(
    bulk: schemas.TaskBulkUpdate,
    service: Annotated[TaskService, Depends(get_task_service)],
    session: Annotated[Session, Depends(get_db)],
    principal: Annotated[Principal, Depends(get_current_principal)],
    context: Annotated[AuditRequestContext, Depends(get_audit_context)],
):
    """
    Reorder or restatus several tasks. Tasks the caller cannot update are skipped.
    """
    items = [item.model_dump(exclude_unset=True) for item in bulk.tasks]
    return service.bulk_update_tasks(session, principal, items, context)


@router.get("/{task_id}", response_model=schemas.TaskResponse)
def get_task(
    task_id: str,
    service: Annotated[TaskService, Depends(get_task_service)],
    session: Annotated[Session, Depends(get_db)],
    principal: Annotated[Principal, Depends(get_current_principal)],
    context: Annotated[AuditRequestContext, Depends(get_audit_context)],
):
    with _access_errors():
        return service.get_task(session, principal, task_id, context)


@router.patch("/{task_id}", response_model=schemas.TaskResponse)
def update_task(
    task_id: str,
    updates: schemas.TaskUpdate,
    service: Annotated[TaskService, Depends(get_task_service)],
    session: Annotated[Session, Depends(get_db)],
    principal: Annotated[Principal, Depends(get_current_principal)],
    context: Annotated[AuditRequestContext, Depends(get_audit_context)],
):
    """
    Update a Task.
    """
    update_data = updates.model_dump(exclude_unset=True)
    if not update_data:
        raise HTTPException(status_code=400, detail="No fields to update")

    with _access_errors():
        return service.update_task(session, principal, task_id, update_data, context)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: str,
    service: Annotated[TaskService, Depends(get_task_service)],
    session: Annotated[Session, Depends(get_db)],
    principal: Annotated[Principal, Depends(get_current_principal)],
    context: Annotated[AuditRequestContext, Depends(get_audit_context)],
):
    with _access_errors():
        service.delete_task(session, principal, task_id, context)
    return None
