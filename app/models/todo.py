"""Todo model."""

from sqlalchemy import BigInteger, Boolean, Column, Float, ForeignKey, Integer, String, Text

from app import clock
from app.database import Base


class Todo(Base):
    """Task owned by a user. ``parent_id`` makes it a sub-task of another todo.

    ``project_id`` and ``label_id`` may point at the user's own or at system rows.
    """

    __tablename__ = "todo"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True)
    parent_id = Column(Integer, ForeignKey("todo.id", ondelete="CASCADE"), nullable=True, index=True)
    project_id = Column(Integer, ForeignKey("project.id", ondelete="SET NULL"), nullable=True, index=True)
    label_id = Column(Integer, ForeignKey("label.id", ondelete="SET NULL"), nullable=True, index=True)
    task_name = Column(String(512), nullable=False)
    description = Column(Text, nullable=True)
    due_date = Column(BigInteger, nullable=False)
    priority = Column(Float, nullable=True)
    is_completed = Column(Boolean, nullable=False, default=False)
    created_at = Column(BigInteger, nullable=False, default=lambda: clock.now_ms())
    updated_at = Column(BigInteger, nullable=False, default=lambda: clock.now_ms(), onupdate=lambda: clock.now_ms())
