from datetime import datetime, timedelta, timezone

import pytest

from todo_api.errors import (
    TaskAccessDeniedError,
    TaskNotFoundError,
    UserAlreadyExistsError,
    UserNotFoundError,
    UserValidationError,
)
from todo_api.schemas.task import TaskCreate, TaskUpdate
from todo_api.services.task_query import TaskQueryParams
from todo_api.services.task_service import TaskService
from todo_api.services.user_service import UserService


@pytest.fixture()
def task_service(session):
    return TaskService(session)


@pytest.fixture()
def user_service(session):
    return UserService(session)


class TestTaskService:
    def test_toggle_flips_back_and_forth(self, task_service, user):
        task = task_service.create_task(user.id, TaskCreate(title="Water plants"))

        assert task_service.toggle_task_completion(task.id).completed is True
        assert task_service.toggle_task_completion(task.id).completed is False

    def test_toggle_missing_task_raises(self, task_service):
        with pytest.raises(TaskNotFoundError):
            task_service.toggle_task_completion("missing")

    def test_ownership_is_enforced_when_user_given(self, task_service, user, other_user):
        task = task_service.create_task(user.id, TaskCreate(title="Private"))

        with pytest.raises(TaskAccessDeniedError):
            task_service.get_task_by_id(task.id, other_user.id)
        with pytest.raises(TaskAccessDeniedError):
            task_service.update_task(task.id, TaskUpdate(title="Hijacked"), user_id=other_user.id)
        with pytest.raises(TaskAccessDeniedError):
            task_service.delete_task(task.id, user_id=other_user.id)

        assert task_service.get_task_by_id(task.id, user.id).title == "Private"

    def test_delete_hides_task_from_every_read(self, task_service, user):
        task = task_service.create_task(user.id, TaskCreate(title="Temporary"))

        task_service.delete_task(task.id, user_id=user.id)

        assert task_service.get_task_by_id(task.id) is None
        assert task_service.task_exists(task.id) is False
        assert task_service.get_tasks_by_user_id(user.id) == []
        assert task_service.get_tasks_with_query(TaskQueryParams(user_id=user.id)).total == 0

    def test_query_combines_store_and_engine_filters(self, task_service, user, make_task):
        start = datetime(2024, 6, 1, tzinfo=timezone.utc)
        make_task(user.id, "Report draft", created_at=start, completed=True)
        make_task(user.id, "Report final", created_at=start + timedelta(days=2), completed=True)
        make_task(user.id, "Report review", created_at=start + timedelta(days=3))
        make_task(user.id, "Groceries", created_at=start + timedelta(days=1), completed=True)

        result = task_service.get_tasks_with_query(TaskQueryParams(
            user_id=user.id,
            completed=True,
            title="report",
            sort_order="asc",
        ))

        assert [t.title for t in result.tasks] == ["Report draft", "Report final"]
        assert result.total == 2


class TestUserService:
    def test_create_and_lookup(self, user_service):
        created = user_service.create_user("Carla@Example.com")

        assert created.email == "carla@example.com"
        assert user_service.find_by_email("CARLA@example.com").id == created.id
        assert user_service.find_by_id(created.id).email == "carla@example.com"
        assert user_service.exists("carla@example.com") is True

    def test_duplicate_email_is_rejected(self, user_service, user):
        with pytest.raises(UserAlreadyExistsError):
            user_service.create_user("ANA@example.com")

    def test_invalid_email_is_rejected(self, user_service):
        with pytest.raises(UserValidationError):
            user_service.create_user("not-an-email")

    def test_find_or_create_never_creates(self, user_service, user):
        found, is_new = user_service.find_or_create("ana@example.com")
        assert found.id == user.id
        assert is_new is False

        with pytest.raises(UserNotFoundError):
            user_service.find_or_create("nobody@example.com")
        assert user_service.exists("nobody@example.com") is False
