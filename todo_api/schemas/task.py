"""Task schemas for the todo API."""
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool

from todo_api.models.task import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH


class TaskCreate(BaseModel):
    """Schema for creating a task. The owner defaults to the caller."""
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = Field(default="", max_length=DESCRIPTION_MAX_LENGTH)
    user_id: Optional[str] = Field(default=None, description="Must match the caller when given")


class TaskUpdate(BaseModel):
    """Schema for updating a task; omitted fields stay unchanged."""
    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(None, min_length=1, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX_LENGTH)
    completed: Optional[StrictBool] = None


class TaskResponse(BaseModel):
    """Schema for task API responses."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    title: str
    description: str
    completed: bool
    created_at: datetime
    updated_at: datetime


class PaginationMeta(BaseModel):
    total: int
    page: int
    limit: int
    total_pages: int


def serialize_task(task: Any) -> Dict[str, Any]:
    return TaskResponse.model_validate(task).model_dump(mode="json")
