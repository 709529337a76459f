import logging
import uuid
from datetime import date
from typing import Callable, Dict, List, Literal, Optional, TypeVar

from pydantic import BaseModel

from taskflow.models.task import TaskPriority, TaskStatus
from taskflow.schemas.subtask import SubtaskRead
from taskflow.schemas.task import TaskRead, TaskStats
from taskflow.schemas.user import UserRead
from .api import ApiClient
from .auth import SIGNED_IN, SIGNED_OUT, USER_UPDATED, AuthGateway, AuthSession, ProfileRepository
from .errors import ClientError
from .generation import SubtaskGenerationProxy
from .repositories import SubtaskRepository, TaskRepository

logger = logging.getLogger(__name__)

Page = Literal["home", "login", "signup", "dashboard", "profile"]

RECENT_TASKS_LIMIT = 6

T = TypeVar("T")


class TaskForm(BaseModel):
    title: str = ""
    description: str = ""
    due_date: Optional[date] = None
    priority: TaskPriority = TaskPriority.medium
    editing_task_id: Optional[uuid.UUID] = None


class DashboardState:
    """
    View state of the application and the actions that change it.

    Every action goes through `_run`: on failure the error is logged and
    shown in `error`, and everything else keeps its previous value.
    """

    def __init__(self, api: ApiClient):
        self.api = api
        self.auth = AuthGateway(api)
        self.tasks_repo = TaskRepository(api)
        self.subtasks_repo = SubtaskRepository(api)
        self.profile_repo = ProfileRepository(api, self.auth)
        self.generator = SubtaskGenerationProxy(api)

        self.current_page: Page = "home"
        self.user: Optional[UserRead] = None
        self.tasks: List[TaskRead] = []
        self.recent_tasks: List[TaskRead] = []
        self.stats = TaskStats(total=0, completed=0, pending=0)
        self.status_filter: Optional[TaskStatus] = None
        self.priority_filter: Optional[TaskPriority] = None
        self.subtasks: Dict[uuid.UUID, List[SubtaskRead]] = {}
        self.generated_subtasks: Dict[uuid.UUID, List[str]] = {}
        self.form = TaskForm()
        self.error: Optional[str] = None
        self.is_loading = False

        self._subscription = self.auth.on_auth_state_change(self._on_auth_change)

    # --- plumbing ---

    def _run(self, action: str, fn: Callable[[], T]) -> Optional[T]:
        self.is_loading = True
        self.error = None
        try:
            return fn()
        except ClientError as e:
            logger.warning("%s failed: %s", action, e.message)
            self.error = e.message
            return None
        finally:
            self.is_loading = False

    def _on_auth_change(self, event: str, session: Optional[AuthSession]) -> None:
        if event == SIGNED_IN and session is not None:
            self.user = session.user
            self.current_page = "dashboard"
        elif event == SIGNED_OUT:
            self._clear_data()
            self.current_page = "home"
        elif event == USER_UPDATED and session is not None:
            self.user = session.user

    def _clear_data(self) -> None:
        self.user = None
        self.tasks = []
        self.recent_tasks = []
        self.stats = TaskStats(total=0, completed=0, pending=0)
        self.subtasks = {}
        self.generated_subtasks = {}
        self.form = TaskForm()
        self.status_filter = None
        self.priority_filter = None

    def close(self) -> None:
        self._subscription.unsubscribe()

    # --- navigation & auth ---

    def navigate(self, page: Page) -> None:
        self.current_page = page

    def dismiss_error(self) -> None:
        self.error = None

    def sign_in(self, email: str, password: str) -> bool:
        if self._run("Sign in", lambda: self.auth.sign_in(email, password)) is None:
            return False
        self.refresh()
        return True

    def sign_up(self, email: str, password: str, full_name: str) -> bool:
        if self._run("Sign up", lambda: self.auth.sign_up(email, password, full_name)) is None:
            return False
        self.refresh()
        return True

    def sign_out(self) -> None:
        self.auth.sign_out()

    def restore_session(self) -> bool:
        user = self._run("Load current user", self.auth.get_current_user)
        if user is None:
            return False
        self.user = user
        self.current_page = "dashboard"
        self.refresh()
        return True

    # --- tasks ---

    def refresh(self) -> None:
        def load():
            tasks = self.tasks_repo.get_tasks(status=self.status_filter, priority=self.priority_filter)
            recent = self.tasks_repo.get_recent_tasks(RECENT_TASKS_LIMIT)
            stats = self.tasks_repo.get_task_stats()
            return tasks, recent, stats

        loaded = self._run("Load tasks", load)
        if loaded is not None:
            self.tasks, self.recent_tasks, self.stats = loaded

    def set_filters(
        self,
        status: Optional[TaskStatus] = None,
        priority: Optional[TaskPriority] = None,
    ) -> None:
        self.status_filter = status
        self.priority_filter = priority
        self.refresh()

    def update_form(self, **fields) -> None:
        self.form = self.form.model_copy(update=fields)

    def start_editing(self, task: TaskRead) -> None:
        self.form = TaskForm(
            title=task.title,
            description=task.description or "",
            due_date=task.due_date,
            priority=task.priority,
            editing_task_id=task.id,
        )

    def cancel_editing(self) -> None:
        self.form = TaskForm()

    def submit_task_form(self) -> Optional[TaskRead]:
        form = self.form
        if form.editing_task_id is not None:
            saved = self._run("Update task", lambda: self.tasks_repo.update_task(
                form.editing_task_id,
                title=form.title,
                description=form.description,
                due_date=form.due_date,
                priority=form.priority,
            ))
        else:
            saved = self._run("Create task", lambda: self.tasks_repo.create_task(
                form.title,
                description=form.description or None,
                due_date=form.due_date,
                priority=form.priority,
            ))

        if saved is not None:
            self.form = TaskForm()
            self.refresh()
        return saved

    def toggle_task(self, task_id: uuid.UUID) -> Optional[TaskRead]:
        updated = self._run("Update task status", lambda: self.tasks_repo.toggle_task_status(task_id))
        if updated is not None:
            self.refresh()
        return updated

    def delete_task(self, task_id: uuid.UUID) -> bool:
        if self._run("Delete task", lambda: self.tasks_repo.delete_task(task_id) or True) is None:
            return False
        self.subtasks.pop(task_id, None)
        self.generated_subtasks.pop(task_id, None)
        self.refresh()
        return True

    # --- subtasks ---

    def load_subtasks(self, task_id: uuid.UUID) -> None:
        subtasks = self._run("Load subtasks", lambda: self.subtasks_repo.get_subtasks(task_id))
        if subtasks is not None:
            self.subtasks[task_id] = subtasks

    def add_subtask(self, task_id: uuid.UUID, title: str) -> Optional[SubtaskRead]:
        created = self._run("Add subtask", lambda: self.subtasks_repo.create_subtask(task_id, title))
        if created is not None:
            self.subtasks[task_id] = self.subtasks.get(task_id, []) + [created]
        return created

    def toggle_subtask(self, subtask: SubtaskRead) -> Optional[SubtaskRead]:
        updated = self._run("Update subtask", lambda: self.subtasks_repo.toggle_subtask_status(subtask.id))
        if updated is not None:
            self.subtasks[subtask.task_id] = [
                updated if s.id == updated.id else s for s in self.subtasks.get(subtask.task_id, [])
            ]
        return updated

    def delete_subtask(self, subtask: SubtaskRead) -> bool:
        if self._run("Delete subtask", lambda: self.subtasks_repo.delete_subtask(subtask.id) or True) is None:
            return False
        self.subtasks[subtask.task_id] = [s for s in self.subtasks.get(subtask.task_id, []) if s.id != subtask.id]
        return True

    def generate_subtasks(self, task: TaskRead) -> Optional[List[str]]:
        suggestions = self._run("Generate subtasks", lambda: self.generator.generate(task.title))
        if suggestions is not None:
            self.generated_subtasks[task.id] = suggestions
        return suggestions

    def accept_generated_subtasks(self, task_id: uuid.UUID) -> List[SubtaskRead]:
        titles = self.generated_subtasks.get(task_id, [])
        created = []
        for title in titles:
            subtask = self.add_subtask(task_id, title)
            if subtask is None:
                # Only the suggestions not yet saved stay up for a retry
                self.generated_subtasks[task_id] = titles[len(created):]
                return created
            created.append(subtask)
        self.generated_subtasks.pop(task_id, None)
        return created

    # --- profile ---

    def save_profile(self, full_name: str) -> Optional[UserRead]:
        return self._run("Update profile", lambda: self.profile_repo.update_user_profile(full_name=full_name))

    def upload_avatar(self, filename: str, content: bytes, content_type: str) -> Optional[str]:
        def upload():
            url = self.profile_repo.upload_profile_image(filename, content, content_type)
            self.profile_repo.update_user_profile(avatar_url=url)
            return url

        return self._run("Upload profile image", upload)
