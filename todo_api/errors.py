"""Domain errors and the FastAPI handlers that render them."""
from typing import Any, Dict, List, Optional
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class TodoAPIError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class RepositoryError(TodoAPIError):
    """The document store failed to serve a request."""


class TaskNotFoundError(TodoAPIError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Task not found"


class TaskAccessDeniedError(TodoAPIError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not authorized to access this task"


class TaskValidationError(TodoAPIError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"


class InvalidQueryError(TodoAPIError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid query parameters"


class UserNotFoundError(TodoAPIError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "User not found"


class UserAlreadyExistsError(TodoAPIError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "User already exists"


class UserValidationError(TodoAPIError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid email format"


class TokenVerificationError(TodoAPIError):
    """A bearer token could not be verified."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Token verification failed"


class TokenExpiredError(TokenVerificationError):
    default_message = "Token expired"


class InvalidTokenError(TokenVerificationError):
    default_message = "Invalid token"


def _error_body(message: str, **extra: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "message": message}
    body.update(extra)
    return body


def _validation_errors(exc: RequestValidationError) -> List[Dict[str, str]]:
    errors = []
    for error in exc.errors():
        # loc looks like ("body", "title") or ("query", "page")
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({
            "field": ".".join(location) if location else "unknown",
            "message": error.get("msg", "Invalid value"),
        })
    return errors


def register_exception_handlers(app: FastAPI, debug: bool = False) -> None:
    """Render every error as the ``{"success": false, "message": ...}`` envelope."""

    @app.exception_handler(TodoAPIError)
    async def todo_error_handler(request: Request, exc: TodoAPIError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message), headers=headers)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        message = exc.detail
        if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
            message = f"Route {request.url.path} not found"
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(str(message)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body("Validation failed", errors=_validation_errors(exc)),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        extra = {"error": str(exc)} if debug else {}
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body("Internal server error", **extra),
        )
