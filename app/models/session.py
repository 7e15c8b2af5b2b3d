"""Login session model."""

from sqlalchemy import BigInteger, Column, ForeignKey, Integer, String

from app import clock
from app.database import Base


class AuthSession(Base):
    """Bearer session issued on register/login.

    A row is usable only while ``now < expires_at``; expired rows stay in
    the table until pruned after a later login or wiped by a password reset.
    """

    __tablename__ = "session"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True)
    token = Column(String(128), unique=True, nullable=False, index=True)
    expires_at = Column(BigInteger, nullable=False)
    user_agent = Column(String(512), nullable=True)
    ip_address = Column(String(64), nullable=True)
    created_at = Column(BigInteger, nullable=False, default=lambda: clock.now_ms())

    def __repr__(self) -> str:
        return f"<AuthSession user={self.user_id} expires_at={self.expires_at}>"
