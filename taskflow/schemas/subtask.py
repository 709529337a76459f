from sqlmodel import SQLModel
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, List, Optional
from datetime import datetime
import uuid
from ..models.task import TaskStatus
from .task import clean_title


class SubtaskCreate(SQLModel):
    title: str
    status: TaskStatus = TaskStatus.pending

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value):
        return clean_title(value)

class SubtaskRead(SQLModel):
    id: uuid.UUID
    task_id: uuid.UUID
    user_id: uuid.UUID
    title: str
    status: TaskStatus
    created_at: datetime
    updated_at: datetime

class SubtaskUpdate(SQLModel):
    title: Optional[str] = None
    status: Optional[TaskStatus] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value):
        return clean_title(value)

    def changes(self) -> Dict[str, Any]:
        return {key: value for key, value in self.model_dump(exclude_unset=True).items() if value is not None}


# Wire format of the generate-subtasks function keeps the camelCase key
class GenerateSubtasksRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    task_title: Optional[str] = Field(default=None, alias="taskTitle")

class GenerateSubtasksResponse(BaseModel):
    subtasks: List[str]
