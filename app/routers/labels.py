"""Label API endpoints."""

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user
from app.models.label import Label
from app.schemas.label import (
    DeleteUnusedLabelsResponse,
    LabelCreateRequest,
    LabelListResponse,
    LabelResponse,
    LabelUpdateRequest,
)
from app.services.auth import PublicUser
from app.services.label import get_label_service

router = APIRouter(prefix="/api/v1/labels", tags=["Labels"])


def _owned_label(db: Session, user: PublicUser, label_id: int) -> Label:
    label = get_label_service().get_label(db, user.id, label_id)
    if not label or label.user_id != user.id:
        raise HTTPException(status_code=404, detail="Label not found")
    return label


def _label_list(labels: list[Label]) -> LabelListResponse:
    return LabelListResponse(items=[LabelResponse.model_validate(label) for label in labels], total=len(labels))


@router.post("/", response_model=LabelResponse, status_code=201)
def create_label(
    body: LabelCreateRequest,
    user: PublicUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> LabelResponse:
    """Create a label. Names are unique per user."""
    return LabelResponse.model_validate(get_label_service().create_label(db, user.id, body.name))


@router.get("/", response_model=LabelListResponse)
def list_labels(
    type: Literal["user", "system"] | None = None,
    user: PublicUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> LabelListResponse:
    """List visible labels, or only the user's own or only the system ones."""
    return _label_list(get_label_service().list_labels(db, user.id, label_type=type))


@router.get("/search", response_model=LabelListResponse)
def search_labels(
    q: str,
    user: PublicUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> LabelListResponse:
    return _label_list(get_label_service().search_labels(db, user.id, q))


@router.delete("/unused", response_model=DeleteUnusedLabelsResponse)
def delete_unused_labels(
    user: PublicUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> DeleteUnusedLabelsResponse:
    """Delete the user's labels that no todo uses."""
    deleted, skipped = get_label_service().delete_unused_labels(db, user.id)
    return DeleteUnusedLabelsResponse(deleted=deleted, skipped=skipped)


@router.get("/{label_id}", response_model=LabelResponse)
def get_label(
    label_id: int,
    user: PublicUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> LabelResponse:
    label = get_label_service().get_label(db, user.id, label_id)
    if not label:
        raise HTTPException(status_code=404, detail="Label not found")
    return LabelResponse.model_validate(label)


@router.patch("/{label_id}", response_model=LabelResponse)
def rename_label(
    label_id: int,
    body: LabelUpdateRequest,
    user: PublicUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> LabelResponse:
    label = _owned_label(db, user, label_id)
    return LabelResponse.model_validate(get_label_service().rename_label(db, label, body.name))


@router.delete("/{label_id}")
def delete_label(
    label_id: int,
    replacement_id: int | None = None,
    user: PublicUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    """Delete a label.

    A label still used by todos is refused with 409 unless ``replacement_id``
    names another visible label; its todos are then moved there first.
    """
    service = get_label_service()
    label = _owned_label(db, user, label_id)
    if replacement_id is None:
        service.delete_label(db, label)
        return {"detail": "Label deleted", "moved_todos": 0}

    replacement = service.get_label(db, user.id, replacement_id)
    if not replacement:
        raise HTTPException(status_code=404, detail="Replacement label not found")
    moved = service.force_delete_label(db, label, replacement)
    return {"detail": "Label deleted", "moved_todos": moved}
