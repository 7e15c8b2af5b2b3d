"""Notification model."""

from sqlalchemy import BigInteger, Boolean, Column, ForeignKey, Integer, String

from app import clock
from app.database import Base

NOTIFICATION_TYPES = ("success", "reminder", "alert")


class Notification(Base):
    __tablename__ = "notification"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(16), nullable=False)
    title = Column(String(100), nullable=False)
    message = Column(String(500), nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(BigInteger, nullable=False, default=lambda: clock.now_ms())
