from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from orgtasks.storage.models import TaskCategory, TaskPriority, TaskStatus

# --- Tasks ---

class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    category: TaskCategory = TaskCategory.OTHER
    due_date: Optional[datetime] = None
    sort_order: int = 0
    owner_id: Optional[str] = Field(None, description="Defaults to the caller")

class TaskUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    category: Optional[TaskCategory] = None
    due_date: Optional[datetime] = None
    sort_order: Optional[int] = None
    owner_id: Optional[str] = None

class TaskBulkUpdateItem(BaseModel):
    id: str
    status: Optional[TaskStatus] = None
    sort_order: Optional[int] = None

class TaskBulkUpdate(BaseModel):
    tasks: List[TaskBulkUpdateItem]

class TaskResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    category: TaskCategory
    due_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    sort_order: int
    owner_id: str
    organization_id: str
    created_at: datetime
    updated_at: datetime
    is_overdue: bool
    is_completed: bool
