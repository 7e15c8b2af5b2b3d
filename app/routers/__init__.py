"""API routers."""

from app.routers.auth import router as auth_router
from app.routers.labels import router as labels_router
from app.routers.notifications import router as notifications_router
from app.routers.projects import router as projects_router
from app.routers.todos import router as todos_router

__all__ = ["auth_router", "labels_router", "notifications_router", "projects_router", "todos_router"]
