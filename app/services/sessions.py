"""Session store: opaque bearer tokens with absolute expiry."""

import secrets

from sqlalchemy.orm import Session

from app import clock
from app.models.session import AuthSession

TOKEN_BYTES = 32


def is_active(session: AuthSession, now: int | None = None) -> bool:
    """A session is usable strictly before its expiry instant."""
    if now is None:
        now = clock.now_ms()
    return now < session.expires_at


class SessionStore:
    """Creates, looks up and deletes login sessions.

    Lookups never filter by expiry; callers apply ``is_active``. Expired rows
    are only removed lazily, by ``prune_expired_for_user`` after a login or by
    ``delete_all_for_user`` after a password reset.
    """

    def create(
        self,
        db: Session,
        user_id: int,
        ttl_ms: int,
        user_agent: str | None = None,
        ip_address: str | None = None,
    ) -> str:
        """Insert a session expiring ``ttl_ms`` from now and return its token."""
        now = clock.now_ms()
        token = secrets.token_urlsafe(TOKEN_BYTES)
        db.add(
            AuthSession(
                user_id=user_id,
                token=token,
                expires_at=now + ttl_ms,
                user_agent=user_agent,
                ip_address=ip_address,
                created_at=now,
            )
        )
        db.commit()
        return token

    def find_by_token(self, db: Session, token: str) -> AuthSession | None:
        """Find a session by token, expired or not."""
        return db.query(AuthSession).filter(AuthSession.token == token).first()

    def delete_by_token(self, db: Session, token: str) -> bool:
        """Delete the session with this token. Returns False if there was none."""
        deleted = db.query(AuthSession).filter(AuthSession.token == token).delete(synchronize_session=False)
        db.commit()
        return deleted > 0

    def delete_all_for_user(self, db: Session, user_id: int) -> int:
        """Delete every session owned by the user. Returns the number removed."""
        deleted = db.query(AuthSession).filter(AuthSession.user_id == user_id).delete(synchronize_session=False)
        db.commit()
        return deleted

    def prune_expired_for_user(self, db: Session, user_id: int) -> int:
        """Delete the user's sessions whose expiry has passed. Returns the number removed."""
        now = clock.now_ms()
        deleted = (
            db.query(AuthSession)
            .filter(AuthSession.user_id == user_id, AuthSession.expires_at < now)
            .delete(synchronize_session=False)
        )
        db.commit()
        return deleted

    def list_for_user(self, db: Session, user_id: int) -> list[AuthSession]:
        """All sessions of a user, newest first."""
        return (
            db.query(AuthSession)
            .filter(AuthSession.user_id == user_id)
            .order_by(AuthSession.created_at.desc(), AuthSession.id.desc())
            .all()
        )


_session_store: SessionStore | None = None


def get_session_store() -> SessionStore:
    """Get singleton session store instance."""
    global _session_store
    if _session_store is None:
        _session_store = SessionStore()
    return _session_store
