"""
Audit Trail Recorder - append-only audit entries with query and aggregation.

The recorder writes through its own session scope, so an audit entry is never
part of the transaction of the action it describes. It does not check who is
asking; gating reads with `RBACEngine.can_view_audit_log` is the caller's job.
"""

from typing import Optional

from prometheus_client import Counter

from orgtasks.audit.schemas import (
    AuditLogDraft,
    AuditLogEntry,
    AuditLogPage,
    AuditLogQuery,
    AuditStats,
    Pagination,
)
from orgtasks.platform.logging import get_logger
from orgtasks.storage.base import StorageAdapter
from orgtasks.storage.models import UserModel, utcnow
from orgtasks.storage.models_audit import AuditLogModel
from orgtasks.storage.repositories.audit_repository import AuditRepository

logger = get_logger(__name__)

AUDIT_WRITE_FAILURES = Counter(
    "orgtasks_audit_write_failures_total",
    "Audit entries that could not be written",
)

UNKNOWN_USER_EMAIL = "Unknown"
UNKNOWN_USER_NAME = "Unknown User"


def _to_entry(log: AuditLogModel, user: Optional[UserModel]) -> AuditLogEntry:
    """Entries outlive their users, so a missing account gets placeholder names."""
    entry = AuditLogEntry.model_validate(log)
    return entry.model_copy(update={
        "user_email": user.email if user else UNKNOWN_USER_EMAIL,
        "user_full_name": user.full_name if user else UNKNOWN_USER_NAME,
    })


class AuditTrailRecorder:

    def __init__(self, storage: StorageAdapter, repo: Optional[AuditRepository] = None):
        self.storage = storage
        self.repo = repo or AuditRepository()

    def append(self, draft: AuditLogDraft) -> AuditLogEntry:
        """
        Write one entry. Raises on storage failure; callers on a primary
        workflow should go through `record_best_effort` instead.
        """
        with self.storage.get_session() as session:
            log = AuditLogModel(
                user_id=draft.user_id,
                action=draft.action.value,
                resource=draft.resource.value,
                resource_id=draft.resource_id,
                details=draft.details,
                ip_address=draft.ip_address,
                user_agent=draft.user_agent,
                timestamp=utcnow(),
                success=draft.success,
                error_message=draft.error_message,
            )
            self.repo.create(session, log)
            entry = _to_entry(log, session.get(UserModel, log.user_id))

        log_event = logger.info if draft.success else logger.warning
        log_event(
            "audit_recorded",
            audit_id=entry.id,
            action=entry.action.value,
            resource=entry.resource.value,
            resource_id=entry.resource_id,
            user_id=entry.user_id,
            success=entry.success,
            error_message=entry.error_message,
        )
        return entry

    def query(self, query: AuditLogQuery) -> AuditLogPage:
        start, end = query.date_range()
        with self.storage.get_session() as session:
            rows, total = self.repo.query(
                session,
                user_id=query.user_id,
                action=query.action.value if query.action else None,
                resource=query.resource.value if query.resource else None,
                resource_id=query.resource_id,
                success=query.success,
                search=query.search,
                start=start,
                end=end,
                sort_by=query.sort_by,
                descending=query.sort_order == "DESC",
                limit=query.limit,
                offset=query.offset,
            )
            data = [_to_entry(log, user) for log, user in rows]

        return AuditLogPage(
            data=data,
            pagination=Pagination.build(page=query.page, limit=query.limit, total=total),
        )

    def stats(self) -> AuditStats:
        """Point-in-time counts over every entry."""
        with self.storage.get_session() as session:
            return AuditStats(
                total_logs=self.repo.count(session),
                successful_actions=self.repo.count(session, success=True),
                failed_actions=self.repo.count(session, success=False),
                action_breakdown=self.repo.count_by(session, "action"),
                resource_breakdown=self.repo.count_by(session, "resource"),
            )


def record_best_effort(recorder: AuditTrailRecorder, draft: AuditLogDraft) -> Optional[AuditLogEntry]:
    """
    Append an entry without ever raising.

    A failed write is logged and counted, and None is returned; the action
    being audited has already happened and its result stands.
    """
    try:
        return recorder.append(draft)
    except Exception as e:
        AUDIT_WRITE_FAILURES.inc()
        logger.error(
            "audit_write_failed",
            action=draft.action.value,
            resource=draft.resource.value,
            resource_id=draft.resource_id,
            user_id=draft.user_id,
            error=str(e),
            exc_info=True,
        )
        return None
