"""Store-facing repositories for the tasks and users collections."""

from .task_repository import TaskRepository
from .user_repository import UserRepository

__all__ = ["TaskRepository", "UserRepository"]
