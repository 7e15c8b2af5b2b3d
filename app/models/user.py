"""User model."""

from sqlalchemy import BigInteger, Boolean, Column, Integer, String

from app import clock
from app.database import Base


class User(Base):
    """Registered account. Timestamps are epoch milliseconds."""

    __tablename__ = "user"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(256), unique=True, nullable=False, index=True)
    name = Column(String(256), nullable=True)
    password_hash = Column(String(256), nullable=False)
    role = Column(String(32), nullable=False, default="user")
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(BigInteger, nullable=False, default=lambda: clock.now_ms(), index=True)
    updated_at = Column(BigInteger, nullable=False, default=lambda: clock.now_ms())
    last_login_at = Column(BigInteger, nullable=True)

    def __repr__(self) -> str:
        return f"<User {self.email}>"
