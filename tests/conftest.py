# tests/conftest.py

from datetime import datetime, timezone
from typing import Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import todo_api.models  # noqa: F401  registers the tables
from todo_api.db.config import get_session
from todo_api.main import app
from todo_api.models.task import Task
from todo_api.repositories.user_repository import UserRepository
from todo_api.services.token_service import get_token_service


@pytest.fixture()
def engine():
    """Fresh in-memory database per test, shared by every session."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture()
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture()
def client(engine):
    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def user(session):
    return UserRepository(session).create("ana@example.com")


@pytest.fixture()
def other_user(session):
    return UserRepository(session).create("bruno@example.com")


def bearer(user) -> dict:
    token = get_token_service().issue_token(user.id, user.email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def auth_headers(user):
    return bearer(user)


@pytest.fixture()
def make_task(session):
    """Insert a task document directly, with full control over its timestamps."""

    def _make(
        user_id: str,
        title: str,
        created_at: Optional[datetime] = None,
        completed: bool = False,
        active: bool = True,
        description: str = "",
    ) -> Task:
        created_at = created_at or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        task = Task(
            user_id=user_id,
            title=title,
            description=description,
            completed=completed,
            active=active,
            created_at=created_at,
            updated_at=created_at,
        )
        session.add(task)
        session.commit()
        session.refresh(task)
        return task

    return _make
