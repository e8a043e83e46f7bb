import enum
import uuid
from datetime import datetime
from typing import Any, Dict, Optional
from sqlalchemy import String, Text, Boolean, Index
from sqlalchemy.orm import Mapped, mapped_column
from orgtasks.storage.models import Base, JSON_TYPE, TIMESTAMP_TYPE, utcnow


class AuditAction(str, enum.Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    LOGIN = "login"
    LOGOUT = "logout"
    REGISTER = "register"
    BULK_UPDATE = "bulk_update"


class AuditResource(str, enum.Enum):
    TASK = "task"
    USER = "user"
    ORGANIZATION = "organization"
    AUTH = "auth"
    AUDIT_LOG = "audit_log"


class AuditLogModel(Base):
    """One append-only audit trail entry. Rows are inserted, never updated."""
    __tablename__ = "audit_logs"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    timestamp: Mapped[datetime] = mapped_column(TIMESTAMP_TYPE, default=utcnow, nullable=False)

    # No FK to users: entries outlive the accounts they mention
    user_id: Mapped[str] = mapped_column(String, nullable=False)

    action: Mapped[str] = mapped_column(String(50), nullable=False)
    resource: Mapped[str] = mapped_column(String(50), nullable=False)
    resource_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    details: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON_TYPE, nullable=True)
    ip_address: Mapped[Optional[str]] = mapped_column(String(45), nullable=True)
    user_agent: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    success: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("ix_audit_logs_user_timestamp", "user_id", "timestamp"),
        Index("ix_audit_logs_resource_timestamp", "resource", "timestamp"),
        Index("ix_audit_logs_action_timestamp", "action", "timestamp"),
    )

    @property
    def action_description(self) -> str:
        action = self.action.replace("_", " ").title()
        resource = self.resource.replace("_", " ").title()
        return f"{action} {resource}"
