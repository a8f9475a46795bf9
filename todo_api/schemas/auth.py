"""User and authentication schemas for the todo API."""
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, EmailStr


class EmailRequest(BaseModel):
    """Body shared by login, lookup, sign-up and existence checks."""
    model_config = ConfigDict(str_strip_whitespace=True)

    email: EmailStr


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    created_at: datetime
    updated_at: datetime


class TokenPayload(BaseModel):
    """Verified claims carried by a bearer token."""
    user_id: str
    email: Optional[str] = None
    issued_at: Optional[int] = None
    expires_at: Optional[int] = None


def serialize_user(user: Any) -> Dict[str, Any]:
    return UserResponse.model_validate(user).model_dump(mode="json")
