"""Pydantic schemas for todo endpoints."""

from pydantic import BaseModel, Field


class TodoCreateRequest(BaseModel):
    task_name: str = Field(min_length=1, max_length=512)
    due_date: int
    description: str | None = None
    priority: float | None = None
    parent_id: int | None = None
    project_id: int | None = None
    label_id: int | None = None


class TodoUpdateRequest(BaseModel):
    """Only the keys present in the request body are applied."""

    task_name: str | None = Field(default=None, min_length=1, max_length=512)
    description: str | None = None
    due_date: int | None = None
    priority: float | None = None
    is_completed: bool | None = None
    parent_id: int | None = None
    project_id: int | None = None
    label_id: int | None = None


class TodoResponse(BaseModel):
    id: int
    parent_id: int | None
    project_id: int | None
    label_id: int | None
    task_name: str
    description: str | None
    due_date: int
    priority: float | None
    is_completed: bool
    created_at: int
    updated_at: int

    model_config = {"from_attributes": True}


class TodoListResponse(BaseModel):
    items: list[TodoResponse]
    total: int
