"""User directory: persistence of user records keyed by id and unique email."""

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app import clock
from app.errors import EmailTakenError, NotFoundError
from app.models.user import User
from app.services.patch import UNCHANGED, Field, apply_patch


@dataclass(frozen=True)
class UserPatch:
    """Fields a caller may change on a user. Anything left ``UNCHANGED`` is not touched."""

    name: Field[str | None] = UNCHANGED
    email: Field[str] = UNCHANGED
    password_hash: Field[str] = UNCHANGED
    is_active: Field[bool] = UNCHANGED
    last_login_at: Field[int | None] = UNCHANGED


class UserDirectory:
    """Looks up, inserts and patches users. The unique index on email is the final authority."""

    def find_by_email(self, db: Session, email: str) -> User | None:
        """Find a user by exact email."""
        return db.query(User).filter(User.email == email).first()

    def find_by_id(self, db: Session, user_id: int) -> User | None:
        """Find a user by id."""
        return db.get(User, user_id)

    def insert(self, db: Session, email: str, name: str | None, password_hash: str) -> User:
        """Create an active user with the default role.

        Raises EmailTakenError if the email is already stored, including when a
        concurrent registration wins the race after the caller's pre-check.
        """
        now = clock.now_ms()
        user = User(
            email=email,
            name=name,
            password_hash=password_hash,
            role="user",
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise EmailTakenError() from None
        db.refresh(user)
        return user

    def patch(self, db: Session, user_id: int, changes: UserPatch) -> User:
        """Apply the set fields of ``changes`` and bump ``updated_at``."""
        user = self.find_by_id(db, user_id)
        if user is None:
            raise NotFoundError("User not found")

        apply_patch(user, changes)
        user.updated_at = clock.now_ms()
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise EmailTakenError() from None
        db.refresh(user)
        return user


_user_directory: UserDirectory | None = None


def get_user_directory() -> UserDirectory:
    """Get singleton user directory instance."""
    global _user_directory
    if _user_directory is None:
        _user_directory = UserDirectory()
    return _user_directory
