# This file ensures all models are loaded together to resolve circular references
from .user import User
from .task import Task, TaskStatus, TaskPriority
from .subtask import Subtask

__all__ = ["User", "Task", "TaskStatus", "TaskPriority", "Subtask"]
