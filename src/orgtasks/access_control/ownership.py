from typing import Any, Callable, Optional

from orgtasks.access_control.hierarchy import OrganizationHierarchyResolver
from orgtasks.access_control.models import (
    REASON_ASSIGN_OUTSIDE_HIERARCHY,
    REASON_ASSIGN_OUTSIDE_ORGANIZATION,
    REASON_ASSIGN_SELF_ONLY,
    REASON_USER_NOT_FOUND,
    Decision,
    Principal,
    Role,
)
from orgtasks.access_control.rbac import RBACEngine


class OwnerAssignmentValidator:
    """
    Decides whether a principal may make another user the owner of a task.

    This is checked in addition to create/update authorization. It only looks
    at the proposed owner's organization; the task itself always stays in the
    principal's organization.
    """

    def __init__(
        self,
        lookup_user: Callable[[str], Optional[Any]],
        engine: Optional[RBACEngine] = None,
    ):
        self.lookup_user = lookup_user
        self.engine = engine or RBACEngine()

    def validate(
        self,
        principal: Principal,
        proposed_owner_id: str,
        hierarchy: OrganizationHierarchyResolver,
    ) -> Decision:
        """
        Validate an ownership assignment.

        Returns:
            allow with the resolved owner record as `subject`, not_found when
            the proposed owner does not exist, or deny with the reason.
        """
        proposed_owner = self.lookup_user(proposed_owner_id)
        if proposed_owner is None:
            return Decision.not_found(REASON_USER_NOT_FOUND)

        if principal.role is Role.OWNER:
            reachable = self.engine.accessible_organization_ids(principal, hierarchy)
            if proposed_owner.organization_id not in reachable:
                return Decision.deny(REASON_ASSIGN_OUTSIDE_HIERARCHY)
        elif principal.role is Role.ADMIN:
            if proposed_owner.organization_id != principal.organization_id:
                return Decision.deny(REASON_ASSIGN_OUTSIDE_ORGANIZATION)
        elif proposed_owner_id != principal.id:
            return Decision.deny(REASON_ASSIGN_SELF_ONLY)

        return Decision.allow(subject=proposed_owner)
