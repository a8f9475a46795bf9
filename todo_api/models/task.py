"""Task model for SQLModel."""
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, List, Union
import uuid

from sqlmodel import Field, SQLModel

from todo_api.utils.dates import to_utc, utcnow

if TYPE_CHECKING:
    from todo_api.schemas.task import TaskCreate, TaskUpdate

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500


def new_document_id() -> str:
    return uuid.uuid4().hex


class Task(SQLModel, table=True):
    """
    A todo item owned by one user.

    ``active`` is the soft-delete flag: deleting a task flips it to False and
    keeps the document, and every read path skips inactive tasks.
    """

    __tablename__ = "tasks"

    id: str = Field(default_factory=new_document_id, primary_key=True, max_length=32)
    user_id: str = Field(index=True, max_length=64)
    title: str = Field(max_length=TITLE_MAX_LENGTH)
    description: str = Field(default="", max_length=DESCRIPTION_MAX_LENGTH)
    completed: bool = Field(default=False, index=True)
    active: bool = Field(default=True, index=True)
    created_at: datetime = Field(default_factory=utcnow, index=True)
    updated_at: datetime = Field(default_factory=utcnow)


def new_task(user_id: str, data: "TaskCreate") -> Task:
    """Build a fresh, pending, active task from a create request."""
    now = utcnow()
    return Task(
        user_id=user_id,
        title=data.title.strip(),
        description=(data.description or "").strip(),
        completed=False,
        active=True,
        created_at=now,
        updated_at=now,
    )


def apply_update(task: Task, data: "TaskUpdate") -> Task:
    """Apply the provided fields of an update request to ``task`` in place."""
    if data.title is not None:
        task.title = data.title.strip()
    if data.description is not None:
        task.description = data.description.strip()
    if data.completed is not None:
        task.completed = data.completed
    touch(task)
    return task


def touch(task: Task) -> None:
    """Move ``updated_at`` forward, even when the stored value is ahead of the clock."""
    now = utcnow()
    last = to_utc(task.updated_at)
    task.updated_at = now if now > last else last + timedelta(microseconds=1)


def validate_task_fields(data: Union["TaskCreate", "TaskUpdate"]) -> List[str]:
    """Return human readable problems with a task payload, empty when valid."""
    errors = []
    title = getattr(data, "title", None)
    if title is not None:
        if not title.strip():
            errors.append("Title is required")
        elif len(title.strip()) > TITLE_MAX_LENGTH:
            errors.append(f"Title must be less than {TITLE_MAX_LENGTH} characters")

    description = getattr(data, "description", None)
    if description is not None and len(description.strip()) > DESCRIPTION_MAX_LENGTH:
        errors.append(f"Description must be less than {DESCRIPTION_MAX_LENGTH} characters")
    return errors
