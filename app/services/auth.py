"""Authentication service.

Orchestrates the user directory, session store, password hasher and reset
flow. Every operation takes the session token explicitly; there is no
ambient "current session".

Two paths deliberately hide information: ``get_current_user`` returns None
for every kind of invalid session, and ``forgot_password`` reports success
whether or not the email is registered. Everything else raises a typed
``AuthError``.
"""

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from app import clock
from app.config import get_settings
from app.errors import (
    AccountDisabledError,
    EmailTakenError,
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
    NotFoundError,
    UnauthenticatedError,
)
from app.models.user import User
from app.services.delivery import ResetTokenDelivery, get_reset_token_delivery
from app.services.password import PasswordHasher, get_password_hasher
from app.services.password_reset import PasswordResetFlow, get_password_reset_flow
from app.services.patch import UNCHANGED, Field, SetTo
from app.services.sessions import SessionStore, get_session_store, is_active
from app.services.users import UserDirectory, UserPatch, get_user_directory

logger = logging.getLogger("taskboard")


@dataclass(frozen=True)
class PublicUser:
    """User fields safe to return to clients. Never includes the password hash."""

    id: int
    email: str
    name: str | None
    role: str
    created_at: int | None = None

    @classmethod
    def from_model(cls, user: User, include_created_at: bool = False) -> "PublicUser":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            role=user.role,
            created_at=user.created_at if include_created_at else None,
        )


@dataclass(frozen=True)
class RegisterResult:
    user_id: int
    session_token: str
    user: PublicUser


@dataclass(frozen=True)
class LoginResult:
    session_token: str
    user: PublicUser


@dataclass(frozen=True)
class SessionInfo:
    """One signed-in device as shown to its owner. The token itself is never exposed."""

    id: int
    created_at: int
    expires_at: int
    user_agent: str | None
    ip_address: str | None
    current: bool


class AuthService:
    """Handles registration, login, sessions, profile updates and password resets."""

    def __init__(
        self,
        users: UserDirectory | None = None,
        sessions: SessionStore | None = None,
        hasher: PasswordHasher | None = None,
        resets: PasswordResetFlow | None = None,
        delivery: ResetTokenDelivery | None = None,
    ) -> None:
        settings = get_settings()
        self.users = users or get_user_directory()
        self.sessions = sessions or get_session_store()
        self.hasher = hasher or get_password_hasher()
        self.resets = resets or get_password_reset_flow()
        self.delivery = delivery or get_reset_token_delivery()
        self.session_ttl_ms = settings.session_ttl_ms
        self.remember_me_ttl_ms = settings.remember_me_ttl_ms

    def register(
        self,
        db: Session,
        name: str | None,
        email: str,
        password: str,
        user_agent: str | None = None,
        ip_address: str | None = None,
    ) -> RegisterResult:
        """Create an account and open a long-lived session for it."""
        if self.users.find_by_email(db, email) is not None:
            raise EmailTakenError()

        password_hash = self.hasher.hash(password)
        user = self.users.insert(db, email, name, password_hash)
        token = self.sessions.create(
            db, user.id, self.remember_me_ttl_ms, user_agent=user_agent, ip_address=ip_address
        )

        logger.info("Registered user %s", user.id)
        return RegisterResult(user_id=user.id, session_token=token, user=PublicUser.from_model(user))

    def login(
        self,
        db: Session,
        email: str,
        password: str,
        remember_me: bool = False,
        user_agent: str | None = None,
        ip_address: str | None = None,
    ) -> LoginResult:
        """Verify credentials and open a session (24 hours, or 30 days with remember-me)."""
        user = self.users.find_by_email(db, email)
        if user is None:
            logger.info("Failed login attempt")
            raise InvalidCredentialsError()

        if not user.is_active:
            raise AccountDisabledError()

        if not self.hasher.verify(password, user.password_hash):
            logger.info("Failed login attempt")
            raise InvalidCredentialsError()

        ttl_ms = self.remember_me_ttl_ms if remember_me else self.session_ttl_ms
        token = self.sessions.create(db, user.id, ttl_ms, user_agent=user_agent, ip_address=ip_address)
        user = self.users.patch(db, user.id, UserPatch(last_login_at=SetTo(clock.now_ms())))

        try:
            pruned = self.sessions.prune_expired_for_user(db, user.id)
        except Exception:
            db.rollback()
            logger.warning("Pruning expired sessions failed for user %s", user.id, exc_info=True)
        else:
            if pruned:
                logger.info("Pruned %d expired sessions for user %s", pruned, user.id)

        logger.info("User %s logged in", user.id)
        return LoginResult(session_token=token, user=PublicUser.from_model(user))

    def logout(self, db: Session, session_token: str) -> dict:
        """End a session. Unknown tokens are a no-op."""
        if self.sessions.delete_by_token(db, session_token):
            logger.info("Session closed")
        return {"success": True}

    def get_current_user(self, db: Session, session_token: str | None) -> PublicUser | None:
        """Resolve a token to its user, or None for any reason it is not usable."""
        user = self._resolve_session_user(db, session_token)
        if user is None or not user.is_active:
            return None
        return PublicUser.from_model(user, include_created_at=True)

    def list_sessions(self, db: Session, session_token: str | None) -> list[SessionInfo]:
        """Active sessions of the signed-in user, newest first."""
        user = self._resolve_session_user(db, session_token)
        if user is None or not user.is_active:
            raise UnauthenticatedError()

        now = clock.now_ms()
        return [
            SessionInfo(
                id=session.id,
                created_at=session.created_at,
                expires_at=session.expires_at,
                user_agent=session.user_agent,
                ip_address=session.ip_address,
                current=session.token == session_token,
            )
            for session in self.sessions.list_for_user(db, user.id)
            if is_active(session, now)
        ]

    def update_profile(
        self,
        db: Session,
        session_token: str | None,
        name: str | None,
        email: str,
        current_password: str | None = None,
        new_password: str | None = None,
    ) -> PublicUser:
        """Change name and email, and the password when both passwords are given.

        Other sessions of the user stay valid after a password change here.
        """
        user = self._resolve_session_user(db, session_token)
        if user is None:
            raise UnauthenticatedError()

        if email != user.email and self.users.find_by_email(db, email) is not None:
            raise EmailTakenError()

        password_hash: Field[str] = UNCHANGED
        if current_password and new_password:
            if not self.hasher.verify(current_password, user.password_hash):
                raise InvalidCredentialsError("Current password is incorrect")
            password_hash = SetTo(self.hasher.hash(new_password))

        user = self.users.patch(
            db, user.id, UserPatch(name=SetTo(name), email=SetTo(email), password_hash=password_hash)
        )
        logger.info("Profile updated for user %s", user.id)
        return PublicUser.from_model(user)

    def forgot_password(self, db: Session, email: str) -> dict:
        """Issue and deliver a reset token if the email is registered. Always reports success."""
        user = self.users.find_by_email(db, email)
        if user is None:
            return {"success": True}

        token = self.resets.issue(db, user.id)
        try:
            self.delivery.deliver(user, token)
        except Exception:
            logger.exception("Failed to deliver password reset token for user %s", user.id)
        return {"success": True}

    def validate_reset_token(self, db: Session, token: str) -> dict:
        return {"valid": self.resets.is_valid(db, token)}

    def reset_password(self, db: Session, token: str, new_password: str) -> dict:
        """Set a new password with a reset token and revoke every session of the owner."""
        if not self.resets.is_valid(db, token):
            raise InvalidOrExpiredTokenError()

        request = self.resets.find_by_token(db, token)
        user = self.users.find_by_id(db, request.user_id)
        if user is None:
            raise NotFoundError("User not found")

        self.users.patch(db, user.id, UserPatch(password_hash=SetTo(self.hasher.hash(new_password))))
        self.resets.consume(db, token)
        revoked = self.sessions.delete_all_for_user(db, user.id)

        logger.info("Password reset for user %s, revoked %d sessions", user.id, revoked)
        return {"success": True}

    def _resolve_session_user(self, db: Session, session_token: str | None) -> User | None:
        if not session_token:
            return None
        session = self.sessions.find_by_token(db, session_token)
        if session is None or not is_active(session):
            return None
        return self.users.find_by_id(db, session.user_id)


_auth_service: AuthService | None = None


def get_auth_service() -> AuthService:
    """Get singleton auth service instance."""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService()
    return _auth_service
