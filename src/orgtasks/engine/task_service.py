"""
Task Service - Orchestrates task mutations behind authorization decisions.

Every operation follows the same order: decide, mutate and commit, then
record to the audit trail through the best-effort wrapper. A denied or
not-found attempt is recorded as a failed entry before the error is raised.
"""

import enum
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from orgtasks.access_control.exceptions import ResourceNotFoundError
from orgtasks.access_control.hierarchy import OrganizationHierarchyResolver
from orgtasks.access_control.models import REASON_TASK_NOT_FOUND, Decision, Principal
from orgtasks.access_control.ownership import OwnerAssignmentValidator
from orgtasks.access_control.rbac import RBACEngine
from orgtasks.audit.recorder import AuditTrailRecorder, record_best_effort
from orgtasks.audit.schemas import AuditLogDraft, AuditRequestContext
from orgtasks.platform.config import settings
from orgtasks.platform.logging import get_logger
from orgtasks.storage.models import TaskModel, TaskStatus, utcnow
from orgtasks.storage.models_audit import AuditAction, AuditResource
from orgtasks.storage.repositories.organization_repository import OrganizationRepository
from orgtasks.storage.repositories.task_repository import TaskRepository
from orgtasks.storage.repositories.user_repository import UserRepository

logger = get_logger(__name__)

CREATE_FIELDS = ("title", "description", "status", "priority", "category", "due_date", "sort_order")
UPDATE_FIELDS = CREATE_FIELDS + ("owner_id",)
# The only fields an update may clear by sending null
CLEARABLE_FIELDS = ("description", "due_date")


def _plain(value: Any) -> Any:
    if isinstance(value, enum.Enum):
        return value.value
    return value


def _json_safe(values: Dict[str, Any]) -> Dict[str, Any]:
    return {
        key: value.isoformat() if isinstance(value, datetime) else value
        for key, value in values.items()
    }


def _apply_completion(previous_status: Optional[str], updates: Dict[str, Any]) -> None:
    """Stamp completed_at on the way into done, clear it on the way out."""
    new_status = updates.get("status")
    if new_status is None:
        return
    if new_status == TaskStatus.DONE.value and previous_status != TaskStatus.DONE.value:
        updates["completed_at"] = utcnow()
    elif new_status != TaskStatus.DONE.value and previous_status == TaskStatus.DONE.value:
        updates["completed_at"] = None


class TaskService:

    def __init__(
        self,
        task_repo: TaskRepository,
        user_repo: UserRepository,
        org_repo: OrganizationRepository,
        recorder: AuditTrailRecorder,
        engine: Optional[RBACEngine] = None,
    ):
        self.task_repo = task_repo
        self.user_repo = user_repo
        self.org_repo = org_repo
        self.recorder = recorder
        self.engine = engine or RBACEngine()

    # --- Helpers ---

    def _hierarchy(self, session: Session) -> OrganizationHierarchyResolver:
        return OrganizationHierarchyResolver.from_repository(self.org_repo, session)

    def _owner_validator(self, session: Session) -> OwnerAssignmentValidator:
        return OwnerAssignmentValidator(lambda user_id: self.user_repo.get(session, user_id), self.engine)

    def _audit(
        self,
        principal: Principal,
        action: AuditAction,
        context: Optional[AuditRequestContext],
        resource_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        success: bool = True,
        error_message: Optional[str] = None,
    ) -> None:
        context = context or AuditRequestContext()
        record_best_effort(
            self.recorder,
            AuditLogDraft(
                user_id=principal.id,
                action=action,
                resource=AuditResource.TASK,
                resource_id=resource_id,
                details=details,
                ip_address=context.ip_address,
                user_agent=context.user_agent,
                success=success,
                error_message=error_message,
            ),
        )

    def _enforce(
        self,
        decision: Decision,
        principal: Principal,
        action: AuditAction,
        context: Optional[AuditRequestContext],
        resource_id: Optional[str] = None,
    ) -> None:
        if decision.allowed:
            return
        logger.info(
            "task_access_refused",
            user_id=principal.id,
            action=action.value,
            task_id=resource_id,
            outcome=decision.outcome.value,
            reason=decision.reason,
        )
        self._audit(principal, action, context, resource_id, success=False, error_message=decision.reason)
        decision.raise_for_outcome()

    def _load_task(
        self,
        session: Session,
        principal: Principal,
        task_id: str,
        action: AuditAction,
        context: Optional[AuditRequestContext],
    ) -> TaskModel:
        task = self.task_repo.get(session, task_id)
        if task is None:
            self._audit(principal, action, context, task_id, success=False, error_message=REASON_TASK_NOT_FOUND)
            raise ResourceNotFoundError(REASON_TASK_NOT_FOUND)
        return task

    # --- Operations ---

    def create_task(
        self,
        session: Session,
        principal: Principal,
        data: Dict[str, Any],
        context: Optional[AuditRequestContext] = None,
    ) -> TaskModel:
        """
        Create a task in the principal's organization.

        An explicit owner other than the principal must pass ownership
        assignment; the task's organization still comes from the principal.
        """
        self._enforce(self.engine.can_create_task(principal), principal, AuditAction.CREATE, context)

        owner_id = data.get("owner_id") or principal.id
        if owner_id != principal.id:
            decision = self._owner_validator(session).validate(principal, owner_id, self._hierarchy(session))
            self._enforce(decision, principal, AuditAction.CREATE, context)

        fields = {key: _plain(data[key]) for key in CREATE_FIELDS if data.get(key) is not None}
        task = TaskModel(
            id=str(uuid.uuid4()),
            owner_id=owner_id,
            organization_id=principal.organization_id,
            **fields,
        )
        if task.status == TaskStatus.DONE.value:
            task.completed_at = utcnow()

        self.task_repo.create(session, task)
        session.commit()
        logger.info("task_created", task_id=task.id, owner_id=owner_id, organization_id=task.organization_id)

        self._audit(
            principal,
            AuditAction.CREATE,
            context,
            task.id,
            details={
                "title": task.title,
                "status": task.status,
                "priority": task.priority,
                "ownerId": task.owner_id,
            },
        )
        return task

    def list_tasks(
        self,
        session: Session,
        principal: Principal,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        category: Optional[str] = None,
        search: Optional[str] = None,
        sort_by: str = "created_at",
        sort_order: str = "DESC",
        page: int = 1,
        limit: Optional[int] = None,
    ) -> List[TaskModel]:
        scope = self.engine.list_tasks_scope(principal, self._hierarchy(session))
        limit = min(max(limit or settings.TASK_DEFAULT_PAGE_SIZE, 1), settings.TASK_MAX_PAGE_SIZE)
        page = max(page, 1)
        return self.task_repo.list_scoped(
            session,
            scope,
            status=_plain(status),
            priority=_plain(priority),
            category=_plain(category),
            search=search,
            sort_by=sort_by,
            descending=sort_order.upper() == "DESC",
            limit=limit,
            offset=(page - 1) * limit,
        )

    def get_task(
        self,
        session: Session,
        principal: Principal,
        task_id: str,
        context: Optional[AuditRequestContext] = None,
    ) -> TaskModel:
        task = self._load_task(session, principal, task_id, AuditAction.READ, context)
        decision = self.engine.can_view_or_update_task(principal, task, self._hierarchy(session))
        self._enforce(decision, principal, AuditAction.READ, context, task_id)
        return task

    def update_task(
        self,
        session: Session,
        principal: Principal,
        task_id: str,
        updates: Dict[str, Any],
        context: Optional[AuditRequestContext] = None,
    ) -> TaskModel:
        task = self._load_task(session, principal, task_id, AuditAction.UPDATE, context)
        decision = self.engine.can_view_or_update_task(principal, task, self._hierarchy(session))
        self._enforce(decision, principal, AuditAction.UPDATE, context, task_id)

        changes = {
            key: _plain(value)
            for key, value in updates.items()
            if key in UPDATE_FIELDS and (value is not None or key in CLEARABLE_FIELDS)
        }
        previous_owner_id = task.owner_id

        new_owner_id = changes.get("owner_id")
        if new_owner_id is not None and new_owner_id != task.owner_id:
            decision = self._owner_validator(session).validate(principal, new_owner_id, self._hierarchy(session))
            self._enforce(decision, principal, AuditAction.UPDATE, context, task_id)

        _apply_completion(task.status, changes)
        updated = self.task_repo.update(session, task_id, changes)
        session.commit()
        logger.info("task_updated", task_id=task_id, fields=sorted(changes))

        self._audit(
            principal,
            AuditAction.UPDATE,
            context,
            task_id,
            details={
                "updatedFields": sorted(changes),
                "changes": _json_safe(changes),
                "previousOwnerId": previous_owner_id,
                "newOwnerId": updated.owner_id,
            },
        )
        return updated

    def delete_task(
        self,
        session: Session,
        principal: Principal,
        task_id: str,
        context: Optional[AuditRequestContext] = None,
    ) -> None:
        task = self._load_task(session, principal, task_id, AuditAction.DELETE, context)
        self._enforce(self.engine.can_delete_task(principal, task), principal, AuditAction.DELETE, context, task_id)

        details = {"title": task.title, "status": task.status, "ownerId": task.owner_id}
        self.task_repo.delete(session, task_id)
        session.commit()
        logger.info("task_deleted", task_id=task_id)

        self._audit(principal, AuditAction.DELETE, context, task_id, details=details)

    def bulk_update_tasks(
        self,
        session: Session,
        principal: Principal,
        updates: List[Dict[str, Any]],
        context: Optional[AuditRequestContext] = None,
    ) -> List[TaskModel]:
        """
        Reorder or restatus several tasks at once.

        Missing tasks and tasks the principal may not update are skipped, not
        fatal; the result holds only the tasks actually changed.
        Tasks are checked with the view/update rule, which is stricter than
        the delete rule: admins only reach their own organization here.
        """
        hierarchy = self._hierarchy(session)
        updated: List[TaskModel] = []
        skipped: List[str] = []

        for item in updates:
            task_id = item["id"]
            task = self.task_repo.get(session, task_id)
            if task is None or not self.engine.can_view_or_update_task(principal, task, hierarchy).allowed:
                skipped.append(task_id)
                continue

            changes = {key: _plain(item[key]) for key in ("status", "sort_order") if item.get(key) is not None}
            _apply_completion(task.status, changes)
            updated.append(self.task_repo.update(session, task_id, changes))

        session.commit()
        logger.info("tasks_bulk_updated", updated=len(updated), skipped=len(skipped))

        self._audit(
            principal,
            AuditAction.BULK_UPDATE,
            context,
            details={"taskIds": [task.id for task in updated], "skippedIds": skipped},
        )
        return updated
