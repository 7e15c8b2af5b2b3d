"""Label service.

Labels are either owned by a user (``type="user"``) or shared system labels
with no owner. Names are unique per owner. A label that todos still use can
only be removed with ``force_delete_label``, which moves those todos to a
replacement first.
"""

import logging

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app import clock
from app.errors import ConflictError
from app.models.label import Label
from app.models.todo import Todo

logger = logging.getLogger("taskboard")


class LabelService:
    def create_label(self, db: Session, user_id: int | None, name: str) -> Label:
        """Create a label. ``user_id=None`` creates a system label."""
        if self._find_by_name(db, user_id, name) is not None:
            raise ConflictError("Label with this name already exists")

        label = Label(
            user_id=user_id,
            name=name,
            type="system" if user_id is None else "user",
            created_at=clock.now_ms(),
        )
        db.add(label)
        db.commit()
        db.refresh(label)
        return label

    def get_label(self, db: Session, user_id: int, label_id: int) -> Label | None:
        """Get a label the user can see: their own or a system label."""
        return db.query(Label).filter(Label.id == label_id, self._visible_to(user_id)).first()

    def list_labels(self, db: Session, user_id: int, label_type: str | None = None) -> list[Label]:
        """List visible labels. ``label_type`` narrows to ``"user"`` (own) or ``"system"``."""
        query = db.query(Label)
        if label_type == "user":
            query = query.filter(Label.user_id == user_id, Label.type == "user")
        elif label_type == "system":
            query = query.filter(Label.user_id.is_(None), Label.type == "system")
        else:
            query = query.filter(self._visible_to(user_id))
        return query.order_by(Label.id.asc()).all()

    def search_labels(self, db: Session, user_id: int, term: str) -> list[Label]:
        """Case-insensitive substring match on the names of visible labels."""
        return (
            db.query(Label)
            .filter(self._visible_to(user_id), func.lower(Label.name).contains(term.lower(), autoescape=True))
            .order_by(Label.id.asc())
            .all()
        )

    def rename_label(self, db: Session, label: Label, name: str) -> Label:
        if name != label.name and self._find_by_name(db, label.user_id, name) is not None:
            raise ConflictError("Label with this name already exists")
        label.name = name
        db.commit()
        db.refresh(label)
        return label

    def delete_label(self, db: Session, label: Label) -> None:
        """Delete a label no todo uses. Raises ConflictError otherwise."""
        if self._in_use(db, label.id):
            raise ConflictError("Cannot delete label that is being used by todos")
        db.delete(label)
        db.commit()

    def force_delete_label(self, db: Session, label: Label, replacement: Label) -> int:
        """Move every todo from ``label`` to ``replacement``, then delete ``label``.

        Returns the number of todos moved.
        """
        if replacement.id == label.id:
            raise ConflictError("Replacement label must differ from the deleted label")

        label_id, replacement_id = label.id, replacement.id
        moved = (
            db.query(Todo)
            .filter(Todo.label_id == label_id)
            .update({Todo.label_id: replacement_id}, synchronize_session=False)
        )
        db.delete(label)
        db.commit()
        logger.info("Deleted label %s, moved %d todos to label %s", label_id, moved, replacement_id)
        return moved

    def delete_unused_labels(self, db: Session, user_id: int) -> tuple[int, int]:
        """Delete the user's own labels that no todo uses. Returns ``(deleted, skipped)``."""
        deleted = skipped = 0
        for label in self.list_labels(db, user_id, label_type="user"):
            if self._in_use(db, label.id):
                skipped += 1
                continue
            db.delete(label)
            deleted += 1
        db.commit()
        return deleted, skipped

    def _visible_to(self, user_id: int):
        return or_(Label.user_id == user_id, Label.user_id.is_(None))

    def _find_by_name(self, db: Session, user_id: int | None, name: str) -> Label | None:
        owner = Label.user_id.is_(None) if user_id is None else Label.user_id == user_id
        return db.query(Label).filter(owner, Label.name == name).first()

    def _in_use(self, db: Session, label_id: int) -> bool:
        return db.query(Todo.id).filter(Todo.label_id == label_id).first() is not None


_label_service: LabelService | None = None


def get_label_service() -> LabelService:
    """Get singleton label service instance."""
    global _label_service
    if _label_service is None:
        _label_service = LabelService()
    return _label_service
