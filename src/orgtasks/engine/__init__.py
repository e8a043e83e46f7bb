"""OrgTasks Engine - task orchestration behind access control and audit."""

from .task_service import TaskService

__all__ = ["TaskService"]
