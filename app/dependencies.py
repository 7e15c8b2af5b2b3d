"""Authentication dependencies for FastAPI routes."""

from fastapi import Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import get_db
from app.services.auth import PublicUser, get_auth_service

SESSION_COOKIE_NAME = "tb_session"


def get_session_token(request: Request) -> str | None:
    """Read the session token from a Bearer header, falling back to the session cookie."""
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        token = auth_header[7:].strip()
        if token:
            return token
    return request.cookies.get(SESSION_COOKIE_NAME) or None


def get_optional_user(
    token: str | None = Depends(get_session_token),
    db: Session = Depends(get_db),
) -> PublicUser | None:
    """Resolve the current user, or None if the request is not authenticated."""
    return get_auth_service().get_current_user(db, token)


def get_current_user(user: PublicUser | None = Depends(get_optional_user)) -> PublicUser:
    """Require an authenticated user. Raises 401 otherwise."""
    if user is None:
        raise HTTPException(status_code=401, detail="Not authenticated", headers={"WWW-Authenticate": "Bearer"})
    return user


def client_metadata(request: Request) -> tuple[str | None, str | None]:
    """User agent and client IP recorded alongside new sessions."""
    return request.headers.get("User-Agent"), request.client.host if request.client else None


def set_session_cookie(response: Response, token: str, max_age_ms: int) -> None:
    """Set the session cookie to live as long as the session itself."""
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        httponly=True,
        samesite="lax",
        secure=get_settings().COOKIE_SECURE,
        max_age=max_age_ms // 1000,
    )


def clear_session_cookie(response: Response) -> None:
    """Clear the session cookie."""
    response.delete_cookie(key=SESSION_COOKIE_NAME)
