from typing import Any, FrozenSet

from orgtasks.access_control.hierarchy import OrganizationHierarchyResolver
from orgtasks.access_control.models import (
    REASON_CREATE_TASK,
    REASON_DELETE_TASK,
    REASON_TASK_ACCESS,
    REASON_VIEW_AUDIT_LOG,
    Decision,
    Principal,
    Role,
    TaskScope,
)

TASK_MANAGER_ROLES = frozenset({Role.OWNER, Role.ADMIN})


class RBACEngine:
    """
    Engine for role and organization scoped access decisions.

    Every method is a pure function of its arguments: the principal is passed
    explicitly and hierarchy data comes from the resolver handed in by the
    caller. Role checks compare role identity, never level thresholds.
    """

    def can_create_task(self, principal: Principal) -> Decision:
        """Owners and admins may create tasks; viewers never may."""
        if principal.role in TASK_MANAGER_ROLES:
            return Decision.allow()
        return Decision.deny(REASON_CREATE_TASK)

    def accessible_organization_ids(
        self,
        principal: Principal,
        hierarchy: OrganizationHierarchyResolver,
    ) -> FrozenSet[str]:
        """
        Organizations whose tasks the principal may see.

        Owners reach their organization and its direct children; admins only
        their own organization. Viewers are scoped by ownership instead and
        must be handled by the caller.
        """
        if principal.role is Role.OWNER:
            children = hierarchy.get_child_ids(principal.organization_id)
            return frozenset([principal.organization_id, *children])
        if principal.role is Role.ADMIN:
            return frozenset([principal.organization_id])
        raise ValueError("viewers are scoped by task ownership, not by organization")

    def can_view_or_update_task(
        self,
        principal: Principal,
        task: Any,
        hierarchy: OrganizationHierarchyResolver,
    ) -> Decision:
        if principal.role is Role.OWNER:
            allowed = task.organization_id in self.accessible_organization_ids(principal, hierarchy)
        elif principal.role is Role.ADMIN:
            allowed = task.organization_id == principal.organization_id
        else:
            allowed = task.owner_id == principal.id

        return Decision.allow() if allowed else Decision.deny(REASON_TASK_ACCESS)

    def can_delete_task(self, principal: Principal, task: Any) -> Decision:
        """
        Owners and admins may delete any task; anyone may delete their own.

        Organization membership is deliberately not checked here.
        """
        if principal.role in TASK_MANAGER_ROLES or task.owner_id == principal.id:
            return Decision.allow()
        return Decision.deny(REASON_DELETE_TASK)

    def list_tasks_scope(
        self,
        principal: Principal,
        hierarchy: OrganizationHierarchyResolver,
    ) -> TaskScope:
        if principal.role is Role.VIEWER:
            return TaskScope(owner_id=principal.id)
        return TaskScope(organization_ids=self.accessible_organization_ids(principal, hierarchy))

    def can_view_audit_log(self, principal: Principal) -> Decision:
        if principal.role in TASK_MANAGER_ROLES:
            return Decision.allow()
        return Decision.deny(REASON_VIEW_AUDIT_LOG)
