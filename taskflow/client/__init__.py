from .api import ApiClient
from .auth import AuthGateway, AuthSession, ProfileRepository
from .errors import AuthError, ClientError, InvalidInputError, NotFoundError, SubtaskGenerationError
from .generation import SubtaskGenerationProxy
from .repositories import SubtaskRepository, TaskRepository
from .state import DashboardState, TaskForm

__all__ = [
    "ApiClient",
    "AuthGateway",
    "AuthSession",
    "ProfileRepository",
    "TaskRepository",
    "SubtaskRepository",
    "SubtaskGenerationProxy",
    "DashboardState",
    "TaskForm",
    "ClientError",
    "AuthError",
    "InvalidInputError",
    "NotFoundError",
    "SubtaskGenerationError",
]
