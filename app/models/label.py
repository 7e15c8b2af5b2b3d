"""Label model."""

from sqlalchemy import BigInteger, Column, ForeignKey, Integer, String

from app import clock
from app.database import Base


class Label(Base):
    """Tag for todos. ``user_id`` is NULL for system labels."""

    __tablename__ = "label"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=True, index=True)
    name = Column(String(100), nullable=False)
    type = Column(String(16), nullable=False, default="user")
    created_at = Column(BigInteger, nullable=False, default=lambda: clock.now_ms())

    def __repr__(self) -> str:
        return f"<Label {self.name!r} type={self.type}>"
