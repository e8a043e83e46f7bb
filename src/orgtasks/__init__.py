"""
OrgTasks - Multi-tenant task tracking with organization-scoped access control

This package contains the OrgTasks backend:
- access_control: Decision Engine, organization hierarchy, ownership assignment
- audit: Audit Trail Recorder (append, query, stats)
- engine: Task Mutation Orchestrator
- storage: Database adapters, models and repositories
- api: FastAPI REST endpoints
- platform: Cross-cutting concerns (config, logging)
"""

__version__ = "0.1.0"
