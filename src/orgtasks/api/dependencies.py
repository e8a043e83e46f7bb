from typing import Annotated
from fastapi import Depends

from orgtasks.api.database import get_db, get_storage_adapter, get_postgres_adapter, close_postgres_adapter
from orgtasks.api.dependencies_auth import get_rbac_engine
from orgtasks.access_control.rbac import RBACEngine
from orgtasks.audit.recorder import AuditTrailRecorder
from orgtasks.engine.task_service import TaskService
from orgtasks.platform.config import settings
from orgtasks.platform.logging import get_logger
from orgtasks.storage.base import StorageAdapter
from orgtasks.storage.repositories.audit_repository import AuditRepository
from orgtasks.storage.repositories.organization_repository import OrganizationRepository
from orgtasks.storage.repositories.task_repository import TaskRepository
from orgtasks.storage.repositories.user_repository import UserRepository

logger = get_logger(__name__)


def init_resources() -> None:
    """Initialize the database connection (and schema in development)."""
    adapter = get_postgres_adapter()
    adapter.connect()
    if settings.AUTO_CREATE_SCHEMA:
        adapter.create_schema()
        logger.info("database_schema_ensured")


def close_resources() -> None:
    close_postgres_adapter()


def get_audit_recorder(
    adapter: Annotated[StorageAdapter, Depends(get_storage_adapter)],
) -> AuditTrailRecorder:
    return AuditTrailRecorder(adapter, AuditRepository())


def get_task_service(
    recorder: Annotated[AuditTrailRecorder, Depends(get_audit_recorder)],
    rbac: Annotated[RBACEngine, Depends(get_rbac_engine)],
) -> TaskService:
    return TaskService(
        task_repo=TaskRepository(),
        user_repo=UserRepository(),
        org_repo=OrganizationRepository(),
        recorder=recorder,
        engine=rbac,
    )


__all__ = [
    "get_db",
    "get_storage_adapter",
    "get_audit_recorder",
    "get_task_service",
    "init_resources",
    "close_resources",
]
