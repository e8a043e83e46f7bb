import enum
from datetime import datetime, timezone
from typing import Optional
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import (
    String, Integer, Boolean, Text, JSON, DateTime, ForeignKey
)
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP


class Base(DeclarativeBase):
    pass


# Helper to support both Postgres JSONB and generic JSON (for SQLite tests)
JSON_TYPE = JSON().with_variant(JSONB, 'postgresql')
TIMESTAMP_TYPE = DateTime().with_variant(TIMESTAMP(), 'postgresql')


def utcnow() -> datetime:
    """Naive UTC timestamp; all stored times are UTC without tzinfo."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TaskStatus(str, enum.Enum):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"
    CANCELLED = "cancelled"


class TaskPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TaskCategory(str, enum.Enum):
    WORK = "work"
    PERSONAL = "personal"
    PROJECT = "project"
    MEETING = "meeting"
    OTHER = "other"


# --- Organizations ---

class OrganizationModel(Base):
    __tablename__ = "organizations"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    # Two-level hierarchy: a parent never has a parent of its own
    parent_id: Mapped[Optional[str]] = mapped_column(ForeignKey("organizations.id"), index=True)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP_TYPE, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP_TYPE, default=utcnow, onupdate=utcnow)


# --- Users ---

class UserModel(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), default="")
    last_name: Mapped[str] = mapped_column(String(100), default="")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False)  # owner / admin / viewer
    organization_id: Mapped[str] = mapped_column(ForeignKey("organizations.id"), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP_TYPE, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP_TYPE, default=utcnow, onupdate=utcnow)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


# --- Tasks ---

class TaskModel(Base):
    __tablename__ = "tasks"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(20), default=TaskStatus.TODO.value, index=True)
    priority: Mapped[str] = mapped_column(String(20), default=TaskPriority.MEDIUM.value)
    category: Mapped[str] = mapped_column(String(20), default=TaskCategory.OTHER.value)
    due_date: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP_TYPE)
    completed_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP_TYPE)
    sort_order: Mapped[int] = mapped_column(Integer, default=0)
    owner_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    # Set once from the creator's organization, never from the owner's
    organization_id: Mapped[str] = mapped_column(ForeignKey("organizations.id"), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP_TYPE, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP_TYPE, default=utcnow, onupdate=utcnow)

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.DONE.value

    @property
    def is_overdue(self) -> bool:
        if not self.due_date or self.status in (TaskStatus.DONE.value, TaskStatus.CANCELLED.value):
            return False
        return utcnow() > self.due_date
