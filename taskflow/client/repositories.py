import uuid
from datetime import date
from typing import Any, Dict, List, Optional, Union

from taskflow.models.task import TaskPriority, TaskStatus
from taskflow.schemas.subtask import SubtaskRead
from taskflow.schemas.task import TaskRead, TaskStats
from .api import API_PREFIX, ApiClient
from .errors import AuthError, InvalidInputError

TaskId = Union[uuid.UUID, str]

# Sentinel so update calls can tell "leave alone" from "clear"
UNSET: Any = object()


def _require_title(title: Optional[str], what: str = "Task") -> str:
    if title is None or not title.strip():
        raise InvalidInputError(f"{what} title is required")
    return title.strip()


def _enum_value(value):
    return value.value if hasattr(value, "value") else value


class TaskRepository:
    def __init__(self, api: ApiClient):
        self.api = api

    def _list(self, **params) -> List[TaskRead]:
        params = {key: _enum_value(value) for key, value in params.items()}
        return [TaskRead.model_validate(row) for row in self.api.get(f"{API_PREFIX}/tasks/", params=params)]

    def get_tasks(
        self,
        status: Optional[TaskStatus] = None,
        priority: Optional[TaskPriority] = None,
    ) -> List[TaskRead]:
        """All tasks of the signed-in user, newest first."""
        return self._list(status=status, priority=priority)

    def get_recent_tasks(self, limit: int = 6) -> List[TaskRead]:
        return self._list(limit=limit)

    def get_tasks_by_status(self, status: TaskStatus) -> List[TaskRead]:
        return self._list(status=status)

    def get_tasks_by_priority(self, priority: TaskPriority) -> List[TaskRead]:
        return self._list(priority=priority)

    def get_task(self, task_id: TaskId) -> TaskRead:
        return TaskRead.model_validate(self.api.get(f"{API_PREFIX}/tasks/{task_id}"))

    def create_task(
        self,
        title: str,
        description: Optional[str] = None,
        due_date: Optional[date] = None,
        status: Optional[TaskStatus] = None,
        priority: Optional[TaskPriority] = None,
    ) -> TaskRead:
        title = _require_title(title)
        if not self.api.is_authenticated:
            raise AuthError("User not authenticated")

        payload: Dict[str, Any] = {"title": title}
        if description:
            payload["description"] = description
        if due_date is not None:
            payload["due_date"] = due_date.isoformat()
        if status is not None:
            payload["status"] = _enum_value(status)
        if priority is not None:
            payload["priority"] = _enum_value(priority)

        return TaskRead.model_validate(self.api.post(f"{API_PREFIX}/tasks/", json=payload))

    def update_task(
        self,
        task_id: TaskId,
        title: Optional[str] = UNSET,
        description: Optional[str] = UNSET,
        due_date: Optional[date] = UNSET,
        status: Optional[TaskStatus] = UNSET,
        priority: Optional[TaskPriority] = UNSET,
    ) -> TaskRead:
        payload: Dict[str, Any] = {}
        if title is not UNSET:
            payload["title"] = _require_title(title)
        if description is not UNSET:
            payload["description"] = description or None
        if due_date is not UNSET:
            payload["due_date"] = due_date.isoformat() if due_date else None
        if status is not UNSET:
            payload["status"] = _enum_value(status)
        if priority is not UNSET:
            payload["priority"] = _enum_value(priority)

        return TaskRead.model_validate(self.api.put(f"{API_PREFIX}/tasks/{task_id}", json=payload))

    def delete_task(self, task_id: TaskId) -> None:
        self.api.delete(f"{API_PREFIX}/tasks/{task_id}")

    def toggle_task_status(self, task_id: TaskId) -> TaskRead:
        return TaskRead.model_validate(self.api.post(f"{API_PREFIX}/tasks/{task_id}/toggle"))

    def get_task_stats(self) -> TaskStats:
        return TaskStats.model_validate(self.api.get(f"{API_PREFIX}/tasks/stats"))


class SubtaskRepository:
    def __init__(self, api: ApiClient):
        self.api = api

    def get_subtasks(self, task_id: TaskId) -> List[SubtaskRead]:
        rows = self.api.get(f"{API_PREFIX}/tasks/{task_id}/subtasks")
        return [SubtaskRead.model_validate(row) for row in rows]

    def create_subtask(self, task_id: TaskId, title: str) -> SubtaskRead:
        title = _require_title(title, "Subtask")
        if not self.api.is_authenticated:
            raise AuthError("User not authenticated")
        return SubtaskRead.model_validate(
            self.api.post(f"{API_PREFIX}/tasks/{task_id}/subtasks", json={"title": title})
        )

    def update_subtask(
        self,
        subtask_id: TaskId,
        title: Optional[str] = None,
        status: Optional[TaskStatus] = None,
    ) -> SubtaskRead:
        payload: Dict[str, Any] = {}
        if title is not None:
            payload["title"] = _require_title(title, "Subtask")
        if status is not None:
            payload["status"] = _enum_value(status)
        return SubtaskRead.model_validate(self.api.put(f"{API_PREFIX}/subtasks/{subtask_id}", json=payload))

    def delete_subtask(self, subtask_id: TaskId) -> None:
        self.api.delete(f"{API_PREFIX}/subtasks/{subtask_id}")

    def toggle_subtask_status(self, subtask_id: TaskId) -> SubtaskRead:
        return SubtaskRead.model_validate(self.api.post(f"{API_PREFIX}/subtasks/{subtask_id}/toggle"))
