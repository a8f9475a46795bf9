"""User router: login, lookup, sign-up and existence checks."""
from typing import Any, Dict

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from todo_api.db.config import get_session
from todo_api.schemas.auth import EmailRequest, serialize_user
from todo_api.services.token_service import TokenService, get_token_service
from todo_api.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])

USER_NOT_FOUND = {"success": True, "exists": False, "message": "User not found"}


def get_user_service(session: Session = Depends(get_session)) -> UserService:
    """Dependency for getting UserService instance."""
    return UserService(session)


@router.post("/login", response_model=Dict[str, Any])
async def login(
    request: EmailRequest,
    service: UserService = Depends(get_user_service),
    tokens: TokenService = Depends(get_token_service),
):
    """
    Log a user in by email.

    An unknown email is not an error: the response says ``exists: false``
    so the client can offer to create the account.
    """
    user = service.find_by_email(request.email)
    if user is None:
        return dict(USER_NOT_FOUND)

    return {
        "success": True,
        "exists": True,
        "token": tokens.issue_token(user.id, user.email),
        "data": serialize_user(user),
    }


@router.post("/get-by-email", response_model=Dict[str, Any])
async def get_user_by_email(
    request: EmailRequest,
    service: UserService = Depends(get_user_service),
):
    """Look a user up by email without issuing a token."""
    user = service.find_by_email(request.email)
    if user is None:
        return dict(USER_NOT_FOUND)
    return {"success": True, "exists": True, "data": serialize_user(user)}


@router.post("", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED, include_in_schema=False)
async def create_user(
    request: EmailRequest,
    service: UserService = Depends(get_user_service),
    tokens: TokenService = Depends(get_token_service),
):
    """Register a new user and return a token for them."""
    user = service.create_user(request.email)
    return {
        "success": True,
        "message": "User created successfully",
        "data": serialize_user(user),
        "token": tokens.issue_token(user.id, user.email),
    }


@router.post("/check", response_model=Dict[str, Any])
async def check_user_exists(
    request: EmailRequest,
    service: UserService = Depends(get_user_service),
):
    exists = service.exists(request.email)
    return {
        "success": True,
        "exists": exists,
        "message": "User exists" if exists else "User not found",
    }
