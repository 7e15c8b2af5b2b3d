"""Project service: user projects plus read-only system projects."""

from dataclasses import dataclass

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app import clock
from app.errors import ConflictError
from app.models.project import Project
from app.models.todo import Todo
from app.services.patch import UNCHANGED, Field, apply_patch


@dataclass(frozen=True)
class ProjectPatch:
    name: Field[str] = UNCHANGED
    color: Field[str | None] = UNCHANGED
    icon: Field[str | None] = UNCHANGED


class ProjectService:
    """Handles projects. A user sees their own projects and every system project."""

    def create_project(
        self,
        db: Session,
        user_id: int | None,
        name: str,
        color: str | None = None,
        icon: str | None = None,
    ) -> Project:
        """Create a project. ``user_id=None`` creates a system project."""
        project = Project(
            user_id=user_id,
            name=name,
            type="system" if user_id is None else "user",
            color=color,
            icon=icon,
            created_at=clock.now_ms(),
        )
        db.add(project)
        db.commit()
        db.refresh(project)
        return project

    def get_project(self, db: Session, user_id: int, project_id: int) -> Project | None:
        """Get a project the user can see."""
        return (
            db.query(Project)
            .filter(Project.id == project_id, or_(Project.user_id == user_id, Project.user_id.is_(None)))
            .first()
        )

    def list_projects(self, db: Session, user_id: int) -> list[Project]:
        return (
            db.query(Project)
            .filter(or_(Project.user_id == user_id, Project.user_id.is_(None)))
            .order_by(Project.id.asc())
            .all()
        )

    def update_project(self, db: Session, project: Project, changes: ProjectPatch) -> Project:
        apply_patch(project, changes)
        db.commit()
        db.refresh(project)
        return project

    def delete_project(self, db: Session, project: Project) -> None:
        """Delete an empty project. Raises ConflictError while any todo still belongs to it."""
        if db.query(Todo.id).filter(Todo.project_id == project.id).first() is not None:
            raise ConflictError("Cannot delete project that contains todos")
        db.delete(project)
        db.commit()


_project_service: ProjectService | None = None


def get_project_service() -> ProjectService:
    """Get singleton project service instance."""
    global _project_service
    if _project_service is None:
        _project_service = ProjectService()
    return _project_service
