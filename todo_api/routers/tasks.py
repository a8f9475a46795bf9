"""Task router for the todo API."""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import Session

from todo_api.db.config import get_session
from todo_api.errors import TaskNotFoundError
from todo_api.middleware.auth import CurrentUser, get_current_user, verify_user_access
from todo_api.schemas.task import PaginationMeta, TaskCreate, TaskUpdate, serialize_task
from todo_api.services.task_query import DEFAULT_LIMIT, DEFAULT_PAGE, TaskQueryParams
from todo_api.services.task_service import TaskService
from todo_api.utils.dates import parse_date_bound

router = APIRouter(prefix="/tasks", tags=["Tasks"])


def get_task_service(session: Session = Depends(get_session)) -> TaskService:
    """Dependency for getting TaskService instance."""
    return TaskService(session)


@router.get("", response_model=Dict[str, Any])
@router.get("/", response_model=Dict[str, Any], include_in_schema=False)
async def list_tasks(
    current_user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
    page: int = Query(DEFAULT_PAGE, description="Page number, starting at 1"),
    limit: int = Query(DEFAULT_LIMIT, description="Page size, capped at 100"),
    sort_by: str = Query("created_at", description="Sort by field: created_at, updated_at, title"),
    sort_order: str = Query("desc", description="Sort direction: asc, desc"),
    completed: Optional[bool] = Query(None, description="Filter by completion status"),
    title: Optional[str] = Query(None, description="Case-insensitive substring of the title"),
    start_date: Optional[str] = Query(None, description="Created on or after this date (ISO format)"),
    end_date: Optional[str] = Query(None, description="Created on or before this date (ISO format)"),
):
    """Paginated, sorted and filtered listing of the caller's tasks."""
    params = TaskQueryParams(
        user_id=current_user.user_id,
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
        completed=completed,
        title=title,
        start_date=parse_date_bound(start_date),
        end_date=parse_date_bound(end_date, end_of_day=True),
    )
    result = service.get_tasks_with_query(params)
    pagination = PaginationMeta(
        total=result.total,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
    )
    return {
        "success": True,
        "data": [serialize_task(task) for task in result.tasks],
        "count": len(result.tasks),
        "pagination": pagination.model_dump(),
    }


@router.get("/user/{user_id}", response_model=Dict[str, Any])
async def list_user_tasks(
    user_id: str = Depends(verify_user_access),
    service: TaskService = Depends(get_task_service),
):
    """All active tasks of a user, newest first."""
    tasks = service.get_tasks_by_user_id(user_id)
    return {
        "success": True,
        "data": [serialize_task(task) for task in tasks],
        "count": len(tasks),
    }


@router.get("/{task_id}", response_model=Dict[str, Any])
async def get_task(
    task_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """Get a specific task by ID."""
    task = service.get_task_by_id(task_id, current_user.user_id)
    if task is None:
        raise TaskNotFoundError()
    return {"success": True, "data": serialize_task(task)}


@router.post("", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED, include_in_schema=False)
async def create_task(
    task_data: TaskCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """Create a new task owned by the caller."""
    if task_data.user_id and task_data.user_id != current_user.user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to create tasks for this user",
        )

    task = service.create_task(current_user.user_id, task_data)
    return {
        "success": True,
        "message": "Task created successfully",
        "data": serialize_task(task),
    }


@router.put("/{task_id}", response_model=Dict[str, Any])
async def update_task(
    task_id: str,
    task_data: TaskUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """Update title, description or completion of a task."""
    task = service.update_task(task_id, task_data, user_id=current_user.user_id)
    return {
        "success": True,
        "message": "Task updated successfully",
        "data": serialize_task(task),
    }


@router.patch("/{task_id}/toggle", response_model=Dict[str, Any])
async def toggle_task(
    task_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """Toggle task completion status."""
    task = service.toggle_task_completion(task_id, user_id=current_user.user_id)
    return {
        "success": True,
        "message": "Task status toggled successfully",
        "data": serialize_task(task),
    }


@router.delete("/{task_id}", response_model=Dict[str, Any])
async def delete_task(
    task_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """Delete a task. The task is deactivated, not erased."""
    service.delete_task(task_id, user_id=current_user.user_id)
    return {"success": True, "message": "Task deleted successfully"}
