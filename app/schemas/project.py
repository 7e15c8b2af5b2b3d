"""Pydantic schemas for project endpoints."""

from pydantic import BaseModel, Field


class ProjectCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    color: str | None = Field(default=None, max_length=32)
    icon: str | None = Field(default=None, max_length=64)


class ProjectUpdateRequest(BaseModel):
    """Only the keys present in the request body are applied."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    color: str | None = Field(default=None, max_length=32)
    icon: str | None = Field(default=None, max_length=64)


class ProjectResponse(BaseModel):
    id: int
    name: str
    type: str
    color: str | None
    icon: str | None
    created_at: int

    model_config = {"from_attributes": True}


class ProjectListResponse(BaseModel):
    items: list[ProjectResponse]
    total: int
