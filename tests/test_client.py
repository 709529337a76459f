from datetime import date

import httpx
import pytest

from taskflow.client import (
    ApiClient,
    AuthError,
    AuthGateway,
    ClientError,
    InvalidInputError,
    NotFoundError,
    ProfileRepository,
    SubtaskGenerationError,
    SubtaskGenerationProxy,
    SubtaskRepository,
    TaskRepository,
)
from taskflow.client.auth import SIGNED_IN, SIGNED_OUT, USER_UPDATED
from taskflow.main import app
from taskflow.models.task import TaskPriority, TaskStatus
from taskflow.services.subtask_generator import SubtaskGenerator, get_subtask_generator

from .fakes import FakeOpenAI


@pytest.fixture
def gateway(api):
    return AuthGateway(api)


@pytest.fixture
def signed_in(gateway):
    gateway.sign_up("ada@example.com", "s3cret-pass", "Ada Lovelace")
    return gateway


@pytest.fixture
def offline_api():
    """ApiClient whose transport records every request it would have sent."""
    sent = []

    def handler(request):
        sent.append(request)
        return httpx.Response(500)

    api = ApiClient(http=httpx.Client(base_url="http://taskflow.test", transport=httpx.MockTransport(handler)))
    api.sent = sent
    return api


class TestAuthGateway:
    def test_sign_up_signs_in_and_notifies(self, gateway):
        events = []
        gateway.on_auth_state_change(lambda event, session: events.append((event, session)))

        session = gateway.sign_up("ada@example.com", "s3cret-pass", "Ada Lovelace")

        assert session.user.full_name == "Ada Lovelace"
        assert gateway.api.is_authenticated
        assert events == [(SIGNED_IN, session)]

    def test_sign_in_with_bad_password(self, signed_in):
        signed_in.sign_out()
        with pytest.raises(AuthError):
            signed_in.sign_in("ada@example.com", "wrong")
        assert signed_in.session is None

    def test_sign_out_and_unsubscribe(self, signed_in):
        events = []
        subscription = signed_in.on_auth_state_change(lambda event, session: events.append(event))

        signed_in.sign_out()
        assert signed_in.get_current_user() is None
        assert events == [SIGNED_OUT]

        subscription.unsubscribe()
        signed_in.sign_in("ada@example.com", "s3cret-pass")
        assert events == [SIGNED_OUT]

    def test_get_current_user(self, signed_in):
        assert signed_in.get_current_user().email == "ada@example.com"


class TestProfileRepository:
    def test_update_merges_and_emits(self, api, signed_in):
        events = []
        signed_in.on_auth_state_change(lambda event, session: events.append(event))
        profile = ProfileRepository(api, signed_in)

        user = profile.update_user_profile(avatar_url="http://testserver/a.png")

        assert user.full_name == "Ada Lovelace"
        assert user.avatar_url == "http://testserver/a.png"
        assert signed_in.session.user.avatar_url == "http://testserver/a.png"
        assert events == [USER_UPDATED]

    def test_upload_validates_before_sending(self, offline_api):
        profile = ProfileRepository(offline_api, AuthGateway(offline_api))
        with pytest.raises(InvalidInputError):
            profile.upload_profile_image("doc.pdf", b"%PDF", "application/pdf")
        with pytest.raises(InvalidInputError):
            profile.upload_profile_image("big.png", b"0" * (5 * 1024 * 1024 + 1), "image/png")
        assert offline_api.sent == []

    def test_upload(self, api, signed_in):
        url = ProfileRepository(api, signed_in).upload_profile_image("me.webp", b"RIFF0000WEBP", "image/webp")
        assert url.startswith("http://testserver/storage/v1/object/public/profile-images/avatars/")


class TestTaskRepository:
    def test_empty_title_rejected_before_network(self, offline_api):
        offline_api.access_token = "token"
        repo = TaskRepository(offline_api)
        with pytest.raises(InvalidInputError, match="Task title is required"):
            repo.create_task("   ")
        assert offline_api.sent == []

    def test_unauthenticated_create_rejected(self, offline_api):
        with pytest.raises(AuthError, match="User not authenticated"):
            TaskRepository(offline_api).create_task("Write report")
        assert offline_api.sent == []

    def test_crud_round(self, api, signed_in):
        repo = TaskRepository(api)
        task = repo.create_task("Write report", due_date=date(2025, 1, 15), priority=TaskPriority.high)
        assert task.status is TaskStatus.pending
        assert task.due_date == date(2025, 1, 15)

        updated = repo.update_task(task.id, description="with charts", due_date=None)
        assert updated.description == "with charts"
        assert updated.due_date is None
        assert updated.priority is TaskPriority.high

        assert repo.toggle_task_status(task.id).status is TaskStatus.completed
        assert repo.toggle_task_status(task.id).status is TaskStatus.pending

        repo.delete_task(task.id)
        assert repo.get_tasks() == []
        with pytest.raises(NotFoundError):
            repo.get_task(task.id)

    def test_queries_and_stats(self, api, signed_in):
        repo = TaskRepository(api)
        created = [repo.create_task(f"task {i}", priority=TaskPriority.low if i % 2 else TaskPriority.high)
                   for i in range(8)]
        repo.toggle_task_status(created[0].id)

        assert [t.id for t in repo.get_tasks()] == [t.id for t in reversed(created)]
        assert [t.id for t in repo.get_recent_tasks()] == [t.id for t in reversed(created)][:6]
        assert [t.id for t in repo.get_tasks_by_status(TaskStatus.completed)] == [created[0].id]
        assert len(repo.get_tasks_by_priority(TaskPriority.low)) == 4

        stats = repo.get_task_stats()
        assert (stats.total, stats.completed, stats.pending) == (8, 1, 7)

    def test_blank_title_on_update_rejected(self, offline_api):
        with pytest.raises(InvalidInputError):
            TaskRepository(offline_api).update_task("some-id", title="")
        assert offline_api.sent == []


class TestSubtaskRepository:
    def test_lifecycle(self, api, signed_in):
        task = TaskRepository(api).create_task("Plan a wedding")
        repo = SubtaskRepository(api)

        venue = repo.create_subtask(task.id, "Book venue")
        repo.create_subtask(task.id, "Hire photographer")
        assert [s.title for s in repo.get_subtasks(task.id)] == ["Book venue", "Hire photographer"]

        assert repo.toggle_subtask_status(venue.id).status is TaskStatus.completed
        assert repo.update_subtask(venue.id, title="Book the venue").title == "Book the venue"

        repo.delete_subtask(venue.id)
        assert [s.title for s in repo.get_subtasks(task.id)] == ["Hire photographer"]


class TestSubtaskGenerationProxy:
    def test_returns_exact_list(self, api, signed_in):
        fake = FakeOpenAI(content='["Book venue", "Hire photographer", "Send invitations"]')
        app.dependency_overrides[get_subtask_generator] = lambda: SubtaskGenerator(api_key="k", client=fake)

        assert SubtaskGenerationProxy(api).generate("Plan a wedding") == [
            "Book venue", "Hire photographer", "Send invitations",
        ]

    def test_parse_failure_becomes_generic_error(self, api, signed_in):
        fake = FakeOpenAI(content="not json at all")
        app.dependency_overrides[get_subtask_generator] = lambda: SubtaskGenerator(api_key="k", client=fake)

        with pytest.raises(SubtaskGenerationError) as exc_info:
            SubtaskGenerationProxy(api).generate("Plan a wedding")
        assert exc_info.value.message == "Failed to generate subtasks"

    def test_blank_title_rejected_before_network(self, offline_api):
        with pytest.raises(InvalidInputError):
            SubtaskGenerationProxy(offline_api).generate("")
        assert offline_api.sent == []


class TestApiClient:
    def test_non_json_success_body_raises_client_error(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text="ok"))
        api = ApiClient(http=httpx.Client(base_url="http://taskflow.test", transport=transport))

        with pytest.raises(ClientError) as exc_info:
            api.get("/api/v1/tasks/")
        assert exc_info.value.message == "Unexpected response from server"
        assert exc_info.value.status_code == 200

    def test_empty_body_is_none(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(204))
        api = ApiClient(http=httpx.Client(base_url="http://taskflow.test", transport=transport))
        assert api.delete("/api/v1/tasks/x") is None
