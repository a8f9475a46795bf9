"""
Task query engine: filtering, sorting and pagination.

The store only answers equality filters (owner, ``active``, ``completed``).
Everything else happens here, over the candidate documents it returns:
the substring title filter, the ``created_at`` date range, the sort, and
the page slice. ``run_query`` is safe to call on an unfiltered collection;
it re-checks ownership, the soft-delete flag and ``completed`` itself.
"""
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Sequence
import math

from todo_api.errors import InvalidQueryError
from todo_api.models.task import Task
from todo_api.utils.dates import to_naive_utc

SORT_FIELDS = ("created_at", "updated_at", "title")
SORT_ORDERS = ("asc", "desc")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


@dataclass
class TaskQueryParams:
    """Parameters of a paginated task listing for one user."""

    user_id: str
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    sort_by: str = "created_at"
    sort_order: str = "desc"
    completed: Optional[bool] = None
    title: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


@dataclass
class PaginatedTasks:
    tasks: List[Task]
    total: int
    page: int
    limit: int
    total_pages: int


def normalize_params(params: TaskQueryParams) -> TaskQueryParams:
    """
    Clamp paging values and validate the sort and date bounds.

    Out-of-range paging is corrected rather than rejected: a page below 1
    becomes 1, a non-positive limit falls back to the default and a limit
    above ``MAX_LIMIT`` is capped.

    Raises:
        InvalidQueryError: Unknown sort field/order, or start after end
    """
    if params.sort_by not in SORT_FIELDS:
        raise InvalidQueryError(f"Sort field must be one of: {', '.join(SORT_FIELDS)}")
    if params.sort_order not in SORT_ORDERS:
        raise InvalidQueryError(f"Sort order must be one of: {', '.join(SORT_ORDERS)}")

    page = params.page if params.page and params.page >= 1 else DEFAULT_PAGE
    if not params.limit or params.limit < 1:
        limit = DEFAULT_LIMIT
    else:
        limit = min(params.limit, MAX_LIMIT)

    title = params.title.strip() if params.title else None
    start_date = to_naive_utc(params.start_date) if params.start_date else None
    end_date = to_naive_utc(params.end_date) if params.end_date else None

    if start_date and end_date and start_date > end_date:
        raise InvalidQueryError("start_date must be before or equal to end_date")

    return replace(
        params,
        page=page,
        limit=limit,
        title=title or None,
        start_date=start_date,
        end_date=end_date,
    )


def _matches(task: Task, params: TaskQueryParams, needle: Optional[str]) -> bool:
    if task.active is False:
        return False
    if task.user_id != params.user_id:
        return False
    if params.completed is not None and task.completed != params.completed:
        return False
    if needle and needle not in (task.title or "").lower():
        return False

    created_at = to_naive_utc(task.created_at)
    if params.start_date and created_at < params.start_date:
        return False
    if params.end_date and created_at > params.end_date:
        return False
    return True


def filter_tasks(tasks: Iterable[Task], params: TaskQueryParams) -> List[Task]:
    """Keep the active tasks of ``params.user_id`` that match every filter, in input order."""
    needle = params.title.lower() if params.title else None
    return [task for task in tasks if _matches(task, params, needle)]


def _sort_key(sort_by: str) -> Callable[[Task], tuple]:
    if sort_by == "title":
        return lambda task: ((task.title or "").lower(), task.id or "")
    return lambda task: (to_naive_utc(getattr(task, sort_by)), task.id or "")


def sort_tasks(tasks: Iterable[Task], sort_by: str = "created_at", sort_order: str = "desc") -> List[Task]:
    """Return ``tasks`` ordered by one field; ties fall back to the document id."""
    if sort_by not in SORT_FIELDS:
        raise InvalidQueryError(f"Sort field must be one of: {', '.join(SORT_FIELDS)}")
    if sort_order not in SORT_ORDERS:
        raise InvalidQueryError(f"Sort order must be one of: {', '.join(SORT_ORDERS)}")
    return sorted(tasks, key=_sort_key(sort_by), reverse=sort_order == "desc")


def paginate(tasks: Sequence[Task], page: int, limit: int) -> PaginatedTasks:
    """Slice one page out of an already filtered and sorted sequence."""
    total = len(tasks)
    total_pages = math.ceil(total / limit) if total else 0
    start = (page - 1) * limit
    return PaginatedTasks(
        tasks=list(tasks[start:start + limit]),
        total=total,
        page=page,
        limit=limit,
        total_pages=total_pages,
    )


def run_query(tasks: Iterable[Task], params: TaskQueryParams) -> PaginatedTasks:
    """Normalize, filter, sort and paginate in one pass."""
    params = normalize_params(params)
    matching = filter_tasks(tasks, params)
    ordered = sort_tasks(matching, params.sort_by, params.sort_order)
    return paginate(ordered, params.page, params.limit)
