"""Todo service: per-user task CRUD with sub-tasks."""

from dataclasses import dataclass

from sqlalchemy.orm import Session

from app import clock
from app.errors import ConflictError, NotFoundError
from app.models.todo import Todo
from app.services.label import get_label_service
from app.services.patch import UNCHANGED, Field, SetTo, apply_patch
from app.services.project import get_project_service


@dataclass(frozen=True)
class TodoPatch:
    """Fields a caller may change on a todo. Anything left ``UNCHANGED`` is not touched."""

    task_name: Field[str] = UNCHANGED
    description: Field[str | None] = UNCHANGED
    due_date: Field[int] = UNCHANGED
    priority: Field[float | None] = UNCHANGED
    is_completed: Field[bool] = UNCHANGED
    parent_id: Field[int | None] = UNCHANGED
    project_id: Field[int | None] = UNCHANGED
    label_id: Field[int | None] = UNCHANGED


class TodoService:
    """Handles todos. Every lookup is scoped to the owning user."""

    def create_todo(
        self,
        db: Session,
        user_id: int,
        task_name: str,
        due_date: int,
        description: str | None = None,
        priority: float | None = None,
        parent_id: int | None = None,
        project_id: int | None = None,
        label_id: int | None = None,
    ) -> Todo:
        """Create a todo, optionally as a sub-task of one the user owns."""
        if parent_id is not None and self.get_todo(db, user_id, parent_id) is None:
            raise NotFoundError("Parent todo not found")
        self._check_references(db, user_id, project_id, label_id)

        now = clock.now_ms()
        todo = Todo(
            user_id=user_id,
            parent_id=parent_id,
            project_id=project_id,
            label_id=label_id,
            task_name=task_name,
            description=description,
            due_date=due_date,
            priority=priority,
            is_completed=False,
            created_at=now,
            updated_at=now,
        )
        db.add(todo)
        db.commit()
        db.refresh(todo)
        return todo

    def list_todos(
        self,
        db: Session,
        user_id: int,
        completed: bool | None = None,
        due_before: int | None = None,
        parent_id: int | None = None,
        project_id: int | None = None,
        label_id: int | None = None,
    ) -> list[Todo]:
        """Get a user's todos ordered by due date, with optional filters."""
        query = db.query(Todo).filter(Todo.user_id == user_id)
        if completed is not None:
            query = query.filter(Todo.is_completed == completed)
        if due_before is not None:
            query = query.filter(Todo.due_date <= due_before)
        if parent_id is not None:
            query = query.filter(Todo.parent_id == parent_id)
        if project_id is not None:
            query = query.filter(Todo.project_id == project_id)
        if label_id is not None:
            query = query.filter(Todo.label_id == label_id)
        return query.order_by(Todo.due_date.asc(), Todo.id.asc()).all()

    def get_todo(self, db: Session, user_id: int, todo_id: int) -> Todo | None:
        """Get a single todo by ID, scoped to user."""
        return db.query(Todo).filter(Todo.id == todo_id, Todo.user_id == user_id).first()

    def update_todo(self, db: Session, todo: Todo, changes: TodoPatch) -> Todo:
        """Apply the set fields of ``changes``.

        Raises ConflictError if the new parent is the todo itself or one of its sub-tasks.
        """
        parent = changes.parent_id
        if isinstance(parent, SetTo) and parent.value is not None:
            if self.get_todo(db, todo.user_id, parent.value) is None:
                raise NotFoundError("Parent todo not found")
            if self._is_descendant_or_self(db, parent.value, todo.id):
                raise ConflictError("A todo cannot be moved under itself or one of its sub-tasks")

        project = changes.project_id.value if isinstance(changes.project_id, SetTo) else None
        label = changes.label_id.value if isinstance(changes.label_id, SetTo) else None
        self._check_references(db, todo.user_id, project, label)

        apply_patch(todo, changes)
        todo.updated_at = clock.now_ms()
        db.commit()
        db.refresh(todo)
        return todo

    def toggle_completion(self, db: Session, todo: Todo) -> Todo:
        todo.is_completed = not todo.is_completed
        todo.updated_at = clock.now_ms()
        db.commit()
        db.refresh(todo)
        return todo

    def delete_todo(self, db: Session, todo: Todo) -> int:
        """Delete a todo together with all of its sub-tasks. Returns how many rows went."""
        ids = self._with_descendants(db, [todo.id])
        db.query(Todo).filter(Todo.id.in_(ids)).delete(synchronize_session=False)
        db.commit()
        return len(ids)

    def delete_completed_todos(self, db: Session, user_id: int) -> int:
        """Delete every completed todo of the user, sub-tasks included. Returns how many rows went."""
        completed = [
            row.id for row in db.query(Todo.id).filter(Todo.user_id == user_id, Todo.is_completed.is_(True)).all()
        ]
        if not completed:
            return 0
        ids = self._with_descendants(db, completed)
        db.query(Todo).filter(Todo.id.in_(ids)).delete(synchronize_session=False)
        db.commit()
        return len(ids)

    def _with_descendants(self, db: Session, root_ids: list[int]) -> set[int]:
        seen = set(root_ids)
        frontier = list(root_ids)
        while frontier:
            children = [row.id for row in db.query(Todo.id).filter(Todo.parent_id.in_(frontier)).all()]
            frontier = [child for child in children if child not in seen]
            seen.update(frontier)
        return seen

    def _is_descendant_or_self(self, db: Session, candidate_id: int, todo_id: int) -> bool:
        """Walk up the parent chain from ``candidate_id`` looking for ``todo_id``."""
        seen: set[int] = set()
        current = candidate_id
        while current is not None and current not in seen:
            if current == todo_id:
                return True
            seen.add(current)
            current = db.query(Todo.parent_id).filter(Todo.id == current).scalar()
        return False

    def _check_references(self, db: Session, user_id: int, project_id: int | None, label_id: int | None) -> None:
        if project_id is not None and get_project_service().get_project(db, user_id, project_id) is None:
            raise NotFoundError("Project not found")
        if label_id is not None and get_label_service().get_label(db, user_id, label_id) is None:
            raise NotFoundError("Label not found")


_todo_service: TodoService | None = None


def get_todo_service() -> TodoService:
    """Get singleton todo service instance."""
    global _todo_service
    if _todo_service is None:
        _todo_service = TodoService()
    return _todo_service
