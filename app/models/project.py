"""Project model."""

from sqlalchemy import BigInteger, Column, ForeignKey, Integer, String

from app import clock
from app.database import Base


class Project(Base):
    """Group of todos. Rows without an owner are system projects shared by every user."""

    __tablename__ = "project"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=True, index=True)
    name = Column(String(100), nullable=False)
    type = Column(String(16), nullable=False, default="user")
    color = Column(String(32), nullable=True)
    icon = Column(String(64), nullable=True)
    created_at = Column(BigInteger, nullable=False, default=lambda: clock.now_ms())

    def __repr__(self) -> str:
        return f"<Project {self.name!r} type={self.type}>"
