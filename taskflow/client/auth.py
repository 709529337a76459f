import logging
from typing import Callable, List, Optional

from pydantic import BaseModel

from taskflow.schemas.user import UserRead
from .api import API_PREFIX, ApiClient
from .errors import ClientError, InvalidInputError

logger = logging.getLogger(__name__)

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"
USER_UPDATED = "USER_UPDATED"

ACCEPTED_IMAGE_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/webp")
MAX_IMAGE_BYTES = 5 * 1024 * 1024


class AuthSession(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead


AuthCallback = Callable[[str, Optional[AuthSession]], None]


class AuthSubscription:
    def __init__(self, gateway: "AuthGateway", callback: AuthCallback):
        self._gateway = gateway
        self.callback = callback

    def unsubscribe(self) -> None:
        self._gateway._remove_listener(self.callback)


class AuthGateway:
    """Sign-up, sign-in, sign-out and auth-state notifications."""

    def __init__(self, api: ApiClient):
        self.api = api
        self.session: Optional[AuthSession] = None
        self._listeners: List[AuthCallback] = []

    def sign_up(self, email: str, password: str, full_name: str) -> AuthSession:
        self.api.post(
            f"{API_PREFIX}/auth/register",
            json={"email": email, "password": password, "full_name": full_name},
        )
        return self.sign_in(email, password)

    def sign_in(self, email: str, password: str) -> AuthSession:
        token = self.api.post(f"{API_PREFIX}/auth/login", json={"email": email, "password": password})
        self.api.access_token = token["access_token"]
        try:
            user = UserRead.model_validate(self.api.get(f"{API_PREFIX}/auth/me"))
        except ClientError:
            self.api.access_token = None
            raise

        self.session = AuthSession(
            access_token=token["access_token"],
            token_type=token.get("token_type", "bearer"),
            user=user,
        )
        logger.info("Signed in as %s", user.email)
        self._emit(SIGNED_IN, self.session)
        return self.session

    def sign_out(self) -> None:
        # Tokens are stateless; forgetting it is the whole sign-out
        self.api.access_token = None
        self.session = None
        self._emit(SIGNED_OUT, None)

    def get_current_user(self) -> Optional[UserRead]:
        if not self.api.is_authenticated:
            return None
        user = UserRead.model_validate(self.api.get(f"{API_PREFIX}/auth/me"))
        if self.session is not None:
            self.session = self.session.model_copy(update={"user": user})
        return user

    def on_auth_state_change(self, callback: AuthCallback) -> AuthSubscription:
        self._listeners.append(callback)
        return AuthSubscription(self, callback)

    def notify_user_updated(self, user: UserRead) -> None:
        if self.session is not None:
            self.session = self.session.model_copy(update={"user": user})
        self._emit(USER_UPDATED, self.session)

    def _remove_listener(self, callback: AuthCallback) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _emit(self, event: str, session: Optional[AuthSession]) -> None:
        for callback in list(self._listeners):
            callback(event, session)


class ProfileRepository:
    def __init__(self, api: ApiClient, auth: AuthGateway):
        self.api = api
        self.auth = auth

    def update_user_profile(self, full_name: Optional[str] = None, avatar_url: Optional[str] = None) -> UserRead:
        updates = {}
        if full_name is not None:
            if not full_name.strip():
                raise InvalidInputError("Full name is required")
            updates["full_name"] = full_name.strip()
        if avatar_url is not None:
            updates["avatar_url"] = avatar_url

        user = UserRead.model_validate(self.api.put(f"{API_PREFIX}/auth/me", json=updates))
        self.auth.notify_user_updated(user)
        return user

    def upload_profile_image(self, filename: str, content: bytes, content_type: str) -> str:
        """Upload an avatar and return its public URL."""
        if content_type not in ACCEPTED_IMAGE_TYPES:
            raise InvalidInputError("Please upload a JPG, PNG, or WebP image file.")
        if len(content) > MAX_IMAGE_BYTES:
            raise InvalidInputError("File size must be less than 5MB.")

        result = self.api.post(
            f"{API_PREFIX}/storage/avatar",
            files={"file": (filename, content, content_type)},
        )
        return result["public_url"]
