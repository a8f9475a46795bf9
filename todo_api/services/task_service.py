"""Task service: use cases over the tasks collection."""
from typing import List, Optional

from sqlmodel import Session

from todo_api.errors import TaskAccessDeniedError, TaskNotFoundError
from todo_api.models.task import Task
from todo_api.repositories.task_repository import TaskRepository
from todo_api.schemas.task import TaskCreate, TaskUpdate
from todo_api.services.task_query import PaginatedTasks, TaskQueryParams, run_query
from todo_api.utils.logger import get_logger

logger = get_logger("todo_api.tasks")


def ensure_owner(task: Task, user_id: str) -> Task:
    """Raise TaskAccessDeniedError unless ``user_id`` owns ``task``."""
    if task.user_id != user_id:
        raise TaskAccessDeniedError()
    return task


class TaskService:
    """
    Service class for task CRUD, toggling and paginated listing.

    Methods that take an optional ``user_id`` enforce ownership when it is
    given; internal callers that already trust the id may omit it.
    """

    def __init__(self, session: Session):
        self.repository = TaskRepository(session)

    def _load(self, task_id: str, user_id: Optional[str] = None) -> Task:
        task = self.repository.find_by_id(task_id)
        if task is None:
            raise TaskNotFoundError()
        if user_id is not None:
            ensure_owner(task, user_id)
        return task

    def get_tasks_by_user_id(self, user_id: str) -> List[Task]:
        """All active tasks of a user ordered by creation date, newest first."""
        return self.repository.find_by_user_id(user_id)

    def get_tasks_with_query(self, params: TaskQueryParams) -> PaginatedTasks:
        """
        Paginated, sorted and filtered listing.

        The ``completed`` filter is pushed down to the store; the remaining
        filters, the sort and the page slice run in the query engine.
        """
        candidates = self.repository.find_candidates(params.user_id, params.completed)
        result = run_query(candidates, params)
        logger.debug(
            "Task query served",
            user_id=params.user_id,
            candidates=len(candidates),
            total=result.total,
            page=result.page,
        )
        return result

    def get_task_by_id(self, task_id: str, user_id: Optional[str] = None) -> Optional[Task]:
        task = self.repository.find_by_id(task_id)
        if task is not None and user_id is not None:
            ensure_owner(task, user_id)
        return task

    def create_task(self, user_id: str, data: TaskCreate) -> Task:
        task = self.repository.create(user_id, data)
        logger.info("Task created", task_id=task.id, user_id=user_id)
        return task

    def update_task(self, task_id: str, data: TaskUpdate, user_id: Optional[str] = None) -> Task:
        self._load(task_id, user_id)
        task = self.repository.update(task_id, data)
        logger.info("Task updated", task_id=task_id)
        return task

    def toggle_task_completion(self, task_id: str, user_id: Optional[str] = None) -> Task:
        """Flip a task between completed and pending."""
        task = self._load(task_id, user_id)
        updated = self.repository.update(task_id, TaskUpdate(completed=not task.completed))
        logger.info("Task toggled", task_id=task_id, completed=updated.completed)
        return updated

    def delete_task(self, task_id: str, user_id: Optional[str] = None) -> None:
        """Soft-delete a task; it disappears from every read afterwards."""
        self._load(task_id, user_id)
        self.repository.soft_delete(task_id)
        logger.info("Task deleted", task_id=task_id)

    def task_exists(self, task_id: str) -> bool:
        return self.repository.exists(task_id)
