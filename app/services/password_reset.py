"""Password reset flow: time-boxed, single-use reset tokens."""

import secrets

from sqlalchemy.orm import Session

from app import clock
from app.config import get_settings
from app.errors import NotFoundError
from app.models.password_reset import PasswordReset

TOKEN_BYTES = 32


class PasswordResetFlow:
    """Issues and consumes reset requests.

    Issuing a new request leaves earlier ones valid. Consumed requests are
    kept with ``used = True`` and never deleted.
    """

    def __init__(self, ttl_ms: int | None = None) -> None:
        self.ttl_ms = ttl_ms if ttl_ms is not None else get_settings().password_reset_ttl_ms

    def issue(self, db: Session, user_id: int) -> str:
        """Create a reset request for the user and return its token."""
        now = clock.now_ms()
        token = secrets.token_urlsafe(TOKEN_BYTES)
        db.add(
            PasswordReset(
                user_id=user_id,
                token=token,
                expires_at=now + self.ttl_ms,
                used=False,
                created_at=now,
            )
        )
        db.commit()
        return token

    def find_by_token(self, db: Session, token: str) -> PasswordReset | None:
        return db.query(PasswordReset).filter(PasswordReset.token == token).first()

    def consume(self, db: Session, token: str) -> None:
        """Mark the request used. Validity is the caller's responsibility."""
        request = self.find_by_token(db, token)
        if request is None:
            raise NotFoundError("Reset request not found")
        request.used = True
        db.commit()

    def is_valid(self, db: Session, token: str) -> bool:
        """True iff the request exists, is unused and has not expired."""
        request = self.find_by_token(db, token)
        return request is not None and not request.used and clock.now_ms() < request.expires_at


_password_reset_flow: PasswordResetFlow | None = None


def get_password_reset_flow() -> PasswordResetFlow:
    """Get singleton password reset flow instance."""
    global _password_reset_flow
    if _password_reset_flow is None:
        _password_reset_flow = PasswordResetFlow()
    return _password_reset_flow
