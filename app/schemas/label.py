"""Pydantic schemas for label endpoints."""

from pydantic import BaseModel, Field


class LabelCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class LabelUpdateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class LabelResponse(BaseModel):
    id: int
    name: str
    type: str
    created_at: int

    model_config = {"from_attributes": True}


class LabelListResponse(BaseModel):
    items: list[LabelResponse]
    total: int


class DeleteUnusedLabelsResponse(BaseModel):
    deleted: int
    skipped: int
