"""Pydantic schemas for authentication endpoints."""

from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field

from app.services.password import MAX_PASSWORD_BYTES


def _fits_bcrypt(value: str) -> str:
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password cannot exceed {MAX_PASSWORD_BYTES} bytes")
    return value


BcryptPassword = Annotated[str, AfterValidator(_fits_bcrypt)]
NewPassword = Annotated[str, Field(min_length=1), AfterValidator(_fits_bcrypt)]


class RegisterRequest(BaseModel):
    name: str | None = None
    email: str = Field(min_length=3, max_length=256)
    password: NewPassword


class LoginRequest(BaseModel):
    email: str
    password: str
    remember_me: bool = False


class UpdateProfileRequest(BaseModel):
    name: str | None = None
    email: str = Field(min_length=3, max_length=256)
    current_password: str | None = None
    new_password: BcryptPassword | None = None


class ForgotPasswordRequest(BaseModel):
    email: str


class ResetPasswordRequest(BaseModel):
    token: str
    new_password: NewPassword


class UserResponse(BaseModel):
    id: int
    email: str
    name: str | None
    role: str
    created_at: int | None = None

    model_config = {"from_attributes": True}


class RegisterResponse(BaseModel):
    user_id: int
    session_token: str
    user: UserResponse


class LoginResponse(BaseModel):
    session_token: str
    user: UserResponse


class CurrentUserResponse(BaseModel):
    user: UserResponse | None


class ProfileResponse(BaseModel):
    user: UserResponse


class SuccessResponse(BaseModel):
    success: bool = True


class ValidateResetTokenResponse(BaseModel):
    valid: bool


class SessionResponse(BaseModel):
    id: int
    created_at: int
    expires_at: int
    user_agent: str | None
    ip_address: str | None
    current: bool

    model_config = {"from_attributes": True}


class SessionListResponse(BaseModel):
    sessions: list[SessionResponse]
