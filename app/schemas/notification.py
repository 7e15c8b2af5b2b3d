"""Pydantic schemas for notification endpoints."""

from typing import Literal

from pydantic import BaseModel, Field


class NotificationCreateRequest(BaseModel):
    type: Literal["success", "reminder", "alert"]
    title: str = Field(min_length=1, max_length=100)
    message: str = Field(min_length=1, max_length=500)


class NotificationResponse(BaseModel):
    id: int
    type: str
    title: str
    message: str
    is_read: bool
    created_at: int

    model_config = {"from_attributes": True}


class NotificationListResponse(BaseModel):
    items: list[NotificationResponse]
    total: int
    unread: int


class BulkUpdateResponse(BaseModel):
    count: int
