"""
Access control value types: roles, principals and decisions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, FrozenSet, Optional

from pydantic import BaseModel, ConfigDict

from orgtasks.access_control.exceptions import AccessDeniedError, ResourceNotFoundError


# --- Denial reasons (surfaced verbatim to callers) ---

REASON_CREATE_TASK = "only owners and admins can create tasks"
REASON_TASK_ACCESS = "access denied to this task"
REASON_DELETE_TASK = "you can only delete your own tasks or be an admin/owner"
REASON_VIEW_AUDIT_LOG = "only owners and admins can view audit logs"
REASON_ASSIGN_OUTSIDE_HIERARCHY = "cannot assign task to user outside your organization hierarchy"
REASON_ASSIGN_OUTSIDE_ORGANIZATION = "cannot assign task to user outside your organization"
REASON_ASSIGN_SELF_ONLY = "you can only assign tasks to yourself"
REASON_USER_NOT_FOUND = "user not found"
REASON_TASK_NOT_FOUND = "task not found"


# --- Roles ---

class Role(str, Enum):
    OWNER = "owner"
    ADMIN = "admin"
    VIEWER = "viewer"

    @property
    def level(self) -> int:
        return ROLE_LEVELS[self]


ROLE_LEVELS = {
    Role.VIEWER: 0,
    Role.ADMIN: 1,
    Role.OWNER: 2,
}


# --- Principal ---

class Principal(BaseModel):
    """
    The authenticated caller for a single operation.

    Built per request from the identity claims (or a user record) and passed
    explicitly into every decision. The role level is always derived from
    the role, never carried separately.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    role: Role
    organization_id: str

    @property
    def role_level(self) -> int:
        return self.role.level

    @classmethod
    def from_user(cls, user: Any) -> "Principal":
        return cls(id=user.id, role=Role(user.role), organization_id=user.organization_id)


# --- Decisions ---

class DecisionOutcome(str, Enum):
    ALLOW = "allow"
    DENY = "deny"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class Decision:
    """Result of an authorization check. `subject` carries any record resolved while deciding."""
    outcome: DecisionOutcome
    reason: Optional[str] = None
    subject: Any = None

    @classmethod
    def allow(cls, subject: Any = None) -> "Decision":
        return cls(DecisionOutcome.ALLOW, subject=subject)

    @classmethod
    def deny(cls, reason: str) -> "Decision":
        return cls(DecisionOutcome.DENY, reason=reason)

    @classmethod
    def not_found(cls, reason: str) -> "Decision":
        return cls(DecisionOutcome.NOT_FOUND, reason=reason)

    @property
    def allowed(self) -> bool:
        return self.outcome is DecisionOutcome.ALLOW

    def raise_for_outcome(self) -> None:
        if self.outcome is DecisionOutcome.DENY:
            raise AccessDeniedError(self.reason)
        if self.outcome is DecisionOutcome.NOT_FOUND:
            raise ResourceNotFoundError(self.reason)


@dataclass(frozen=True)
class TaskScope:
    """
    Query filter a task listing must apply for a principal.

    Exactly one of the two fields is set: either the task must belong to one
    of `organization_ids`, or it must be owned by `owner_id`.
    """
    organization_ids: Optional[FrozenSet[str]] = None
    owner_id: Optional[str] = None
