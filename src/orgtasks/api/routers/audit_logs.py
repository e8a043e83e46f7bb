"""
Router for the audit trail (owners and admins only).
"""

from datetime import datetime
from typing import Annotated, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, status, Query
from pydantic import ValidationError

from orgtasks.api.dependencies import get_audit_recorder
from orgtasks.api.dependencies_auth import require_audit_viewer
from orgtasks.access_control.models import Principal
from orgtasks.audit.recorder import AuditTrailRecorder
from orgtasks.audit.schemas import AuditLogPage, AuditLogQuery, AuditStats
from orgtasks.storage.models_audit import AuditAction, AuditResource

router = APIRouter()


@router.get("/", response_model=AuditLogPage)
def get_audit_logs(
    recorder: Annotated[AuditTrailRecorder, Depends(get_audit_recorder)],
    _viewer: Annotated[Principal, Depends(require_audit_viewer)],
    user_id: Optional[str] = Query(None, alias="userId"),
    action: Optional[AuditAction] = None,
    resource: Optional[AuditResource] = None,
    resource_id: Optional[str] = Query(None, alias="resourceId"),
    success: Optional[bool] = None,
    search: Optional[str] = None,
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    page: int = 1,
    limit: Optional[int] = None,
    sort_by: str = Query("timestamp", alias="sortBy"),
    sort_order: Literal["ASC", "DESC", "asc", "desc"] = Query("DESC", alias="sortOrder"),
):
    """
    Filtered, sorted, paginated audit entries.
    """
    params = dict(
        user_id=user_id,
        action=action,
        resource=resource,
        resource_id=resource_id,
        success=success,
        search=search,
        start_date=start_date,
        end_date=end_date,
        page=page,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    if limit is not None:
        params["limit"] = limit

    try:
        query = AuditLogQuery(**params)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.errors()[0]["msg"])

    return recorder.query(query)


@router.get("/stats", response_model=AuditStats)
def get_audit_stats(
    recorder: Annotated[AuditTrailRecorder, Depends(get_audit_recorder)],
    _viewer: Annotated[Principal, Depends(require_audit_viewer)],
):
    """
    Totals and per-action / per-resource counts over the whole trail.
    """
    return recorder.stats()
