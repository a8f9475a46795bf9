"""Repository for the ``tasks`` collection."""
from typing import List, Optional
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from todo_api.errors import RepositoryError, TaskNotFoundError, TaskValidationError
from todo_api.models.task import Task, apply_update, new_task, touch, validate_task_fields
from todo_api.schemas.task import TaskCreate, TaskUpdate
from todo_api.services.task_query import sort_tasks

logger = logging.getLogger(__name__)


class TaskRepository:
    """
    Task persistence on top of the document store.

    The store is trusted with equality filters and, when it can, ordering by
    ``created_at``. Soft-deleted documents are filtered out here so no caller
    ever sees them.
    """

    collection = "tasks"

    def __init__(self, session: Session):
        self.session = session

    def _active_for_user(self, user_id: str):
        return (
            select(Task)
            .where(Task.user_id == user_id)
            .where(Task.active == True)
        )

    def find_by_user_id(self, user_id: str) -> List[Task]:
        """Active tasks of a user, newest first."""
        logger.info(f"Finding tasks for user: {user_id}")
        statement = self._active_for_user(user_id)
        try:
            try:
                tasks = list(self.session.exec(statement.order_by(Task.created_at.desc())).all())
            except SQLAlchemyError as order_error:
                logger.warning(f"Ordered query failed, retrying without ordering: {order_error}")
                self.session.rollback()
                tasks = list(self.session.exec(statement).all())
        except SQLAlchemyError as e:
            logger.error(f"Error finding tasks by user id: {e}")
            raise RepositoryError("Failed to find tasks by user id") from e

        # The unordered fallback depends on this sort; it is a no-op otherwise
        tasks = sort_tasks(tasks, "created_at", "desc")
        logger.info(f"Found {len(tasks)} tasks for user: {user_id}")
        return tasks

    def find_candidates(self, user_id: str, completed: Optional[bool] = None) -> List[Task]:
        """Unordered active tasks of a user, narrowed by ``completed`` when given."""
        statement = self._active_for_user(user_id)
        if completed is not None:
            statement = statement.where(Task.completed == completed)
        try:
            return list(self.session.exec(statement).all())
        except SQLAlchemyError as e:
            logger.error(f"Error querying tasks for user {user_id}: {e}")
            raise RepositoryError("Failed to query tasks") from e

    def find_by_id(self, task_id: str) -> Optional[Task]:
        try:
            task = self.session.get(Task, task_id)
        except SQLAlchemyError as e:
            logger.error(f"Error finding task by id: {e}")
            raise RepositoryError("Failed to find task by id") from e

        if task is None or task.active is False:
            return None
        return task

    def create(self, user_id: str, data: TaskCreate) -> Task:
        errors = validate_task_fields(data)
        if errors:
            raise TaskValidationError(f"Validation failed: {', '.join(errors)}")

        task = new_task(user_id, data)
        try:
            self.session.add(task)
            self.session.commit()
            self.session.refresh(task)
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Error creating task: {e}")
            raise RepositoryError("Failed to create task") from e
        return task

    def update(self, task_id: str, data: TaskUpdate) -> Task:
        errors = validate_task_fields(data)
        if errors:
            raise TaskValidationError(f"Validation failed: {', '.join(errors)}")

        task = self.find_by_id(task_id)
        if task is None:
            raise TaskNotFoundError()

        apply_update(task, data)
        self._save(task, "Failed to update task")
        return task

    def soft_delete(self, task_id: str) -> Task:
        """Mark a task inactive; the document itself is kept."""
        task = self.find_by_id(task_id)
        if task is None:
            raise TaskNotFoundError()

        task.active = False
        touch(task)
        self._save(task, "Failed to delete task")
        return task

    def exists(self, task_id: str) -> bool:
        try:
            return self.find_by_id(task_id) is not None
        except RepositoryError as e:
            logger.error(f"Error checking if task exists: {e}")
            return False

    def _save(self, task: Task, failure_message: str) -> None:
        try:
            self.session.add(task)
            self.session.commit()
            self.session.refresh(task)
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"{failure_message}: {e}")
            raise RepositoryError(failure_message) from e
