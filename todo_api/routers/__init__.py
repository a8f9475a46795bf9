"""Routers package for the todo API."""

from .tasks import router as tasks_router
from .users import router as users_router

__all__ = ["tasks_router", "users_router"]
