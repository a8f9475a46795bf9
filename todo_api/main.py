"""Main FastAPI application for the todo API."""
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional
import logging

from fastapi import Depends, FastAPI

from todo_api import __version__
from todo_api.config import get_settings, validate_config
from todo_api.db.init import init_db
from todo_api.errors import register_exception_handlers
from todo_api.middleware.auth import CurrentUser, get_optional_user
from todo_api.middleware.cors import add_cors_middleware
from todo_api.routers import tasks_router, users_router
from todo_api.utils.logger import configure_logging

logger = logging.getLogger(__name__)

API_TITLE = "Todo API"
ENDPOINTS = {
    "health": "/health",
    "api": "/api",
    "docs": "/api-docs",
    "openapi": "/api-docs.json",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup; a database outage must not block the health check."""
    validate_config()
    try:
        init_db()
        logger.info("Database tables initialized successfully.")
    except Exception as e:
        logger.warning(f"Database initialization failed: {e}")
        logger.warning("Server will continue but database operations may fail.")
    logger.info("Application startup complete.")
    yield


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=API_TITLE,
        description="REST API for a todo list: users, tasks and bearer-token authentication",
        version=__version__,
        docs_url="/api-docs",
        openapi_url="/api-docs.json",
        redoc_url=None,
        lifespan=lifespan,
    )

    add_cors_middleware(app, settings)
    register_exception_handlers(app, debug=settings.is_development)

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Liveness check; does not touch the database."""
        return {
            "status": "OK",
            "message": f"{API_TITLE} is running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "env": settings.environment,
            "version": __version__,
            "endpoints": ENDPOINTS,
        }

    @app.get("/api/health", tags=["Health"])
    async def api_health_check():
        return {
            "success": True,
            "message": "API is running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.get("/", tags=["Health"])
    async def root(current_user: Optional[CurrentUser] = Depends(get_optional_user)):
        """API information, plus who the caller is when a valid token is sent."""
        return {
            "name": API_TITLE,
            "version": __version__,
            "description": "Backend API for the todo app",
            "endpoints": ENDPOINTS,
            "authenticated_as": current_user.user_id if current_user else None,
        }

    app.include_router(users_router, prefix="/api")  # /api/users/...
    app.include_router(tasks_router, prefix="/api")  # /api/tasks/...
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "todo_api.main:app",
        host="0.0.0.0",
        port=get_settings().port,
        reload=get_settings().is_development,
    )
