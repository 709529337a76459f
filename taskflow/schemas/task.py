from sqlmodel import SQLModel
from pydantic import field_validator
from typing import Any, Dict, Optional
from datetime import date, datetime
import uuid
from ..models.task import TaskStatus, TaskPriority


def clean_title(value: Optional[str]) -> str:
    if value is None or not value.strip():
        raise ValueError("Task title is required")
    return value.strip()


class TaskBase(SQLModel):
    title: str
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.pending
    priority: TaskPriority = TaskPriority.medium
    due_date: Optional[date] = None

class TaskCreate(TaskBase):
    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value):
        return clean_title(value)

class TaskRead(TaskBase):
    id: uuid.UUID
    user_id: uuid.UUID
    created_at: datetime
    updated_at: datetime

class TaskUpdate(SQLModel):
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[date] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value):
        return clean_title(value)

    def changes(self) -> Dict[str, Any]:
        """Fields the caller actually sent; only description and due_date may be cleared."""
        data = self.model_dump(exclude_unset=True)
        return {
            key: value for key, value in data.items()
            if value is not None or key in ("description", "due_date")
        }

class TaskStats(SQLModel):
    total: int
    completed: int
    pending: int
