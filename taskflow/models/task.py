from sqlmodel import SQLModel, Field, Relationship
from typing import List, Optional
from datetime import date, datetime, timezone
import uuid
from enum import Enum


class TaskStatus(str, Enum):
    pending = "pending"
    completed = "completed"

    def toggled(self) -> "TaskStatus":
        return TaskStatus.completed if self is TaskStatus.pending else TaskStatus.pending


class TaskPriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class Task(SQLModel, table=True):
    __tablename__ = "tasks"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)
    title: str = Field(nullable=False)
    description: Optional[str] = Field(default=None)
    status: TaskStatus = Field(default=TaskStatus.pending)
    priority: TaskPriority = Field(default=TaskPriority.medium)
    due_date: Optional[date] = Field(default=None)

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), nullable=False)

    # Relationship to user
    user: Optional["User"] = Relationship(back_populates="tasks")

    # Subtasks go away with their parent
    subtasks: List["Subtask"] = Relationship(
        back_populates="task",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )
