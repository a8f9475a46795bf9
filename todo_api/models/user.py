"""User model for SQLModel."""
from datetime import datetime
import re

from sqlmodel import Field, SQLModel

from todo_api.models.task import new_document_id
from todo_api.utils.dates import utcnow

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class User(SQLModel, table=True):
    """User entity, identified by email, that owns tasks."""

    __tablename__ = "users"

    id: str = Field(default_factory=new_document_id, primary_key=True, max_length=32)
    email: str = Field(unique=True, index=True, max_length=255)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


def new_user(email: str) -> User:
    now = utcnow()
    return User(email=normalize_email(email), created_at=now, updated_at=now)
