"""Authentication API endpoints."""

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import (
    clear_session_cookie,
    client_metadata,
    get_session_token,
    set_session_cookie,
)
from app.rate_limit import limiter
from app.schemas.auth import (
    CurrentUserResponse,
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    ProfileResponse,
    RegisterRequest,
    RegisterResponse,
    ResetPasswordRequest,
    SessionListResponse,
    SessionResponse,
    SuccessResponse,
    UpdateProfileRequest,
    UserResponse,
    ValidateResetTokenResponse,
)
from app.services.auth import get_auth_service

router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])


@router.post("/register", response_model=RegisterResponse, status_code=201)
@limiter.limit("5/minute")
def register(request: Request, response: Response, body: RegisterRequest, db: Session = Depends(get_db)):
    """Register a new account and start a session."""
    auth_service = get_auth_service()
    user_agent, ip_address = client_metadata(request)
    result = auth_service.register(
        db, body.name, body.email, body.password, user_agent=user_agent, ip_address=ip_address
    )
    set_session_cookie(response, result.session_token, auth_service.remember_me_ttl_ms)
    return RegisterResponse(
        user_id=result.user_id,
        session_token=result.session_token,
        user=UserResponse.model_validate(result.user),
    )


@router.post("/login", response_model=LoginResponse)
@limiter.limit("10/minute")
def login(request: Request, response: Response, body: LoginRequest, db: Session = Depends(get_db)):
    """Authenticate with email and password and start a session."""
    auth_service = get_auth_service()
    user_agent, ip_address = client_metadata(request)
    result = auth_service.login(
        db, body.email, body.password, remember_me=body.remember_me, user_agent=user_agent, ip_address=ip_address
    )
    ttl_ms = auth_service.remember_me_ttl_ms if body.remember_me else auth_service.session_ttl_ms
    set_session_cookie(response, result.session_token, ttl_ms)
    return LoginResponse(session_token=result.session_token, user=UserResponse.model_validate(result.user))


@router.post("/logout", response_model=SuccessResponse)
def logout(
    response: Response,
    token: str | None = Depends(get_session_token),
    db: Session = Depends(get_db),
):
    """End the current session. Succeeds even if the session is already gone."""
    if token:
        get_auth_service().logout(db, token)
    clear_session_cookie(response)
    return SuccessResponse()


@router.get("/me", response_model=CurrentUserResponse)
def me(token: str | None = Depends(get_session_token), db: Session = Depends(get_db)):
    """Return the signed-in user, or null when the session is missing or no longer valid."""
    user = get_auth_service().get_current_user(db, token)
    return CurrentUserResponse(user=UserResponse.model_validate(user) if user else None)


@router.get("/sessions", response_model=SessionListResponse)
def list_sessions(token: str | None = Depends(get_session_token), db: Session = Depends(get_db)):
    """List the signed-in user's active sessions, marking the one making this request."""
    sessions = get_auth_service().list_sessions(db, token)
    return SessionListResponse(sessions=[SessionResponse.model_validate(s) for s in sessions])


@router.put("/profile", response_model=ProfileResponse)
@limiter.limit("10/minute")
def update_profile(
    request: Request,
    body: UpdateProfileRequest,
    token: str | None = Depends(get_session_token),
    db: Session = Depends(get_db),
):
    """Update name, email and optionally the password of the signed-in user."""
    user = get_auth_service().update_profile(
        db,
        token,
        body.name,
        body.email,
        current_password=body.current_password,
        new_password=body.new_password,
    )
    return ProfileResponse(user=UserResponse.model_validate(user))


@router.post("/forgot-password", response_model=SuccessResponse)
@limiter.limit("3/minute")
def forgot_password(request: Request, body: ForgotPasswordRequest, db: Session = Depends(get_db)):
    """Request a password reset. The response is the same whether or not the email exists."""
    get_auth_service().forgot_password(db, body.email)
    return SuccessResponse()


@router.get("/reset-password/validate", response_model=ValidateResetTokenResponse)
def validate_reset_token(token: str, db: Session = Depends(get_db)):
    """Check whether a reset token can still be used."""
    return ValidateResetTokenResponse(**get_auth_service().validate_reset_token(db, token))


@router.post("/reset-password", response_model=SuccessResponse)
@limiter.limit("5/minute")
def reset_password(request: Request, body: ResetPasswordRequest, db: Session = Depends(get_db)):
    """Set a new password with a reset token. Signs the user out everywhere."""
    get_auth_service().reset_password(db, body.token, body.new_password)
    return SuccessResponse()
