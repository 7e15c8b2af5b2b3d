"""Todo API endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user
from app.schemas.todo import TodoCreateRequest, TodoListResponse, TodoResponse, TodoUpdateRequest
from app.services.auth import PublicUser
from app.services.patch import SetTo
from app.services.todo import TodoPatch, get_todo_service

router = APIRouter(prefix="/api/v1/todos", tags=["Todos"])

NON_NULLABLE_FIELDS = {"task_name", "due_date", "is_completed"}


@router.post("/", response_model=TodoResponse, status_code=201)
def create_todo(
    body: TodoCreateRequest,
    user: PublicUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TodoResponse:
    """Create a todo, or a sub-task when ``parent_id`` is given."""
    todo = get_todo_service().create_todo(
        db,
        user.id,
        task_name=body.task_name,
        due_date=body.due_date,
        description=body.description,
        priority=body.priority,
        parent_id=body.parent_id,
        project_id=body.project_id,
        label_id=body.label_id,
    )
    return TodoResponse.model_validate(todo)


@router.get("/", response_model=TodoListResponse)
def list_todos(
    completed: bool | None = None,
    due_before: int | None = None,
    parent_id: int | None = None,
    project_id: int | None = None,
    label_id: int | None = None,
    user: PublicUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TodoListResponse:
    """List the current user's todos, optionally only those in one project or with one label."""
    todos = get_todo_service().list_todos(
        db,
        user.id,
        completed=completed,
        due_before=due_before,
        parent_id=parent_id,
        project_id=project_id,
        label_id=label_id,
    )
    return TodoListResponse(items=[TodoResponse.model_validate(t) for t in todos], total=len(todos))


@router.delete("/completed")
def delete_completed_todos(
    user: PublicUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    """Delete every completed todo of the current user, with their sub-tasks."""
    deleted = get_todo_service().delete_completed_todos(db, user.id)
    return {"detail": "Completed todos deleted", "deleted": deleted}


@router.get("/{todo_id}", response_model=TodoResponse)
def get_todo(
    todo_id: int,
    user: PublicUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TodoResponse:
    todo = get_todo_service().get_todo(db, user.id, todo_id)
    if not todo:
        raise HTTPException(status_code=404, detail="Todo not found")
    return TodoResponse.model_validate(todo)


@router.patch("/{todo_id}", response_model=TodoResponse)
def update_todo(
    todo_id: int,
    body: TodoUpdateRequest,
    user: PublicUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TodoResponse:
    """Update the fields present in the request body."""
    service = get_todo_service()
    todo = service.get_todo(db, user.id, todo_id)
    if not todo:
        raise HTTPException(status_code=404, detail="Todo not found")

    provided = {name: getattr(body, name) for name in body.model_fields_set}
    cleared = sorted(name for name, value in provided.items() if value is None and name in NON_NULLABLE_FIELDS)
    if cleared:
        raise HTTPException(status_code=422, detail=f"Fields cannot be null: {', '.join(cleared)}")

    changes = TodoPatch(**{name: SetTo(value) for name, value in provided.items()})
    todo = service.update_todo(db, todo, changes)
    return TodoResponse.model_validate(todo)


@router.post("/{todo_id}/toggle", response_model=TodoResponse)
def toggle_todo(
    todo_id: int,
    user: PublicUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TodoResponse:
    """Flip the completion flag of a todo."""
    service = get_todo_service()
    todo = service.get_todo(db, user.id, todo_id)
    if not todo:
        raise HTTPException(status_code=404, detail="Todo not found")
    return TodoResponse.model_validate(service.toggle_completion(db, todo))


@router.delete("/{todo_id}")
def delete_todo(
    todo_id: int,
    user: PublicUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    """Delete a todo and its sub-tasks."""
    service = get_todo_service()
    todo = service.get_todo(db, user.id, todo_id)
    if not todo:
        raise HTTPException(status_code=404, detail="Todo not found")
    deleted = service.delete_todo(db, todo)
    return {"detail": "Todo deleted", "deleted": deleted}
