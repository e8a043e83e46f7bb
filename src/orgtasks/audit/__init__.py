"""OrgTasks Audit Trail - append-only recorder with filtered queries and stats."""

from .recorder import AuditTrailRecorder, record_best_effort
from .schemas import (
    AuditLogDraft,
    AuditLogEntry,
    AuditLogPage,
    AuditLogQuery,
    AuditRequestContext,
    AuditStats,
    Pagination,
)

__all__ = [
    "AuditTrailRecorder",
    "record_best_effort",
    "AuditLogDraft",
    "AuditLogEntry",
    "AuditLogPage",
    "AuditLogQuery",
    "AuditRequestContext",
    "AuditStats",
    "Pagination",
]
