"""Password reset request model."""

from sqlalchemy import BigInteger, Boolean, Column, ForeignKey, Integer, String

from app import clock
from app.database import Base


class PasswordReset(Base):
    """Single-use reset token. Consumed rows are kept for audit."""

    __tablename__ = "password_reset"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True)
    token = Column(String(128), unique=True, nullable=False, index=True)
    expires_at = Column(BigInteger, nullable=False)
    used = Column(Boolean, nullable=False, default=False)
    created_at = Column(BigInteger, nullable=False, default=lambda: clock.now_ms())
