"""JWT authentication dependencies for FastAPI."""
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from pydantic import BaseModel

from todo_api.errors import InvalidTokenError, TokenExpiredError, TokenVerificationError
from todo_api.services.token_service import TokenService, get_token_service

MISSING_TOKEN = "No authorization token provided"
BAD_FORMAT = "Invalid token format. Expected: Bearer <token>"
EXPIRED_TOKEN = "Token expired. Please login again."
INVALID_TOKEN = "Invalid authentication token"
AUTH_FAILED = "Authentication failed"


class CurrentUser(BaseModel):
    """User information extracted from JWT."""
    user_id: str
    email: Optional[str] = None


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _extract_token(auth_header: str) -> Optional[str]:
    parts = auth_header.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        return None
    return parts[1]


async def get_current_user(
    request: Request,
    token_service: TokenService = Depends(get_token_service),
) -> CurrentUser:
    """
    Validate the bearer token from the Authorization header.

    Args:
        request: FastAPI request object to extract Authorization header
        token_service: Verifies the token signature and expiry

    Returns:
        CurrentUser with user_id and email from token

    Raises:
        HTTPException: 401 with a message naming why authentication failed
    """
    auth_header = request.headers.get("authorization")
    if not auth_header:
        raise _unauthorized(MISSING_TOKEN)

    token = _extract_token(auth_header)
    if token is None:
        raise _unauthorized(BAD_FORMAT)

    try:
        payload = token_service.verify_token(token)
    except TokenExpiredError:
        raise _unauthorized(EXPIRED_TOKEN)
    except InvalidTokenError:
        raise _unauthorized(INVALID_TOKEN)
    except TokenVerificationError:
        raise _unauthorized(AUTH_FAILED)

    return CurrentUser(user_id=payload.user_id, email=payload.email)


async def get_optional_user(
    request: Request,
    token_service: TokenService = Depends(get_token_service),
) -> Optional[CurrentUser]:
    """Like get_current_user, but anonymous or bad tokens yield None."""
    auth_header = request.headers.get("authorization")
    if not auth_header:
        return None

    token = _extract_token(auth_header)
    if token is None:
        return None

    try:
        payload = token_service.verify_token(token)
    except TokenVerificationError:
        return None
    return CurrentUser(user_id=payload.user_id, email=payload.email)


async def verify_user_access(
    user_id: str,
    current_user: CurrentUser = Depends(get_current_user),
) -> str:
    """
    Verify that the authenticated user matches the requested user ID.

    Returns:
        The verified user ID

    Raises:
        HTTPException: 403 if the path names another user
    """
    if user_id != current_user.user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to access this user's resources",
        )
    return user_id
