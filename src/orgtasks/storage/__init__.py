"""OrgTasks Storage Layer - Relational adapter, models and repositories."""

from .base import StorageAdapter
from .postgres_adapter import PostgresAdapter, PostgresConfig
from .models import (
    Base,
    OrganizationModel,
    TaskModel,
    UserModel,
)
from .models_audit import AuditLogModel

__all__ = [
    "StorageAdapter",
    "PostgresAdapter",
    "PostgresConfig",
    "Base",
    "OrganizationModel",
    "UserModel",
    "TaskModel",
    "AuditLogModel",
]
