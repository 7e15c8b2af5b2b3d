"""Project API endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user
from app.models.project import Project
from app.schemas.project import ProjectCreateRequest, ProjectListResponse, ProjectResponse, ProjectUpdateRequest
from app.services.auth import PublicUser
from app.services.patch import SetTo
from app.services.project import ProjectPatch, get_project_service

router = APIRouter(prefix="/api/v1/projects", tags=["Projects"])


def _owned_project(db: Session, user: PublicUser, project_id: int) -> Project:
    """System projects are visible to everyone but belong to no one, so they 404 here too."""
    project = get_project_service().get_project(db, user.id, project_id)
    if not project or project.user_id != user.id:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.post("/", response_model=ProjectResponse, status_code=201)
def create_project(
    body: ProjectCreateRequest,
    user: PublicUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ProjectResponse:
    project = get_project_service().create_project(db, user.id, body.name, color=body.color, icon=body.icon)
    return ProjectResponse.model_validate(project)


@router.get("/", response_model=ProjectListResponse)
def list_projects(
    user: PublicUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ProjectListResponse:
    """List the current user's projects together with the system projects."""
    projects = get_project_service().list_projects(db, user.id)
    return ProjectListResponse(items=[ProjectResponse.model_validate(p) for p in projects], total=len(projects))


@router.get("/{project_id}", response_model=ProjectResponse)
def get_project(
    project_id: int,
    user: PublicUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ProjectResponse:
    project = get_project_service().get_project(db, user.id, project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return ProjectResponse.model_validate(project)


@router.patch("/{project_id}", response_model=ProjectResponse)
def update_project(
    project_id: int,
    body: ProjectUpdateRequest,
    user: PublicUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ProjectResponse:
    """Update the fields present in the request body."""
    project = _owned_project(db, user, project_id)
    provided = {name: getattr(body, name) for name in body.model_fields_set}
    if "name" in provided and provided["name"] is None:
        raise HTTPException(status_code=422, detail="Fields cannot be null: name")

    changes = ProjectPatch(**{name: SetTo(value) for name, value in provided.items()})
    project = get_project_service().update_project(db, project, changes)
    return ProjectResponse.model_validate(project)


@router.delete("/{project_id}")
def delete_project(
    project_id: int,
    user: PublicUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    """Delete a project. Fails with 409 while it still contains todos."""
    project = _owned_project(db, user, project_id)
    get_project_service().delete_project(db, project)
    return {"detail": "Project deleted"}
