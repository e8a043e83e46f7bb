"""
Audit trail shapes: what callers append, how they query, what they get back.

Wire names are camelCase (`totalPages`, `errorMessage`); Python attributes
stay snake_case and either spelling is accepted on input.
"""

import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from orgtasks.platform.config import settings
from orgtasks.storage.models_audit import AuditAction, AuditResource

EPOCH = datetime(1970, 1, 1)

SORT_FIELDS = {
    "timestamp": "timestamp",
    "action": "action",
    "resource": "resource",
    "userId": "user_id",
    "user_id": "user_id",
    "resourceId": "resource_id",
    "resource_id": "resource_id",
    "success": "success",
}


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class AuditModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class AuditRequestContext(AuditModel):
    """Transport details copied onto every entry written for a request."""
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


class AuditLogDraft(AuditModel):
    """An entry before it is written; the recorder assigns id and timestamp."""
    user_id: str
    action: AuditAction
    resource: AuditResource
    resource_id: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    success: bool = True
    error_message: Optional[str] = None


class AuditLogEntry(AuditModel):
    id: str
    user_id: str
    action: AuditAction
    resource: AuditResource
    resource_id: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    timestamp: datetime
    success: bool
    error_message: Optional[str] = None
    action_description: str
    user_email: Optional[str] = None
    user_full_name: Optional[str] = None


class AuditLogQuery(AuditModel):
    user_id: Optional[str] = None
    action: Optional[AuditAction] = None
    resource: Optional[AuditResource] = None
    resource_id: Optional[str] = None
    success: Optional[bool] = None
    search: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    page: int = 1
    limit: int = Field(default_factory=lambda: settings.AUDIT_DEFAULT_PAGE_SIZE)
    sort_by: str = "timestamp"
    sort_order: Literal["ASC", "DESC"] = "DESC"

    @field_validator("page")
    @classmethod
    def _page_at_least_one(cls, value: int) -> int:
        return max(value, 1)

    @field_validator("limit")
    @classmethod
    def _clamp_limit(cls, value: int) -> int:
        return min(max(value, 1), settings.AUDIT_MAX_PAGE_SIZE)

    @field_validator("sort_by")
    @classmethod
    def _known_sort_field(cls, value: str) -> str:
        if value not in SORT_FIELDS:
            raise ValueError(f"cannot sort audit logs by '{value}'")
        return SORT_FIELDS[value]

    @field_validator("sort_order", mode="before")
    @classmethod
    def _upper_sort_order(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def date_range(self) -> Tuple[Optional[datetime], Optional[datetime]]:
        """Inclusive bounds; a missing bound defaults to epoch or now when the other is given."""
        if self.start_date is None and self.end_date is None:
            return None, None
        start = _naive_utc(self.start_date) if self.start_date else EPOCH
        end = _naive_utc(self.end_date) if self.end_date else datetime.now(timezone.utc).replace(tzinfo=None)
        return start, end


class Pagination(AuditModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        total_pages = math.ceil(total / limit) if limit else 0
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
        )


class AuditLogPage(AuditModel):
    data: List[AuditLogEntry]
    pagination: Pagination


class AuditStats(AuditModel):
    total_logs: int
    successful_actions: int
    failed_actions: int
    action_breakdown: Dict[str, int]
    resource_breakdown: Dict[str, int]
