"""OrgTasks Access Control - Decision Engine, organization hierarchy and ownership assignment."""

from .exceptions import AccessControlError, AccessDeniedError, ResourceNotFoundError
from .models import Decision, DecisionOutcome, Principal, Role, TaskScope
from .hierarchy import OrganizationHierarchyResolver
from .rbac import RBACEngine
from .ownership import OwnerAssignmentValidator

__all__ = [
    "AccessControlError",
    "AccessDeniedError",
    "ResourceNotFoundError",
    "Decision",
    "DecisionOutcome",
    "Principal",
    "Role",
    "TaskScope",
    "OrganizationHierarchyResolver",
    "RBACEngine",
    "OwnerAssignmentValidator",
]
