"""SQLAlchemy models. Importing this package registers every table with ``Base.metadata``."""

from app.models.label import Label
from app.models.notification import Notification
from app.models.password_reset import PasswordReset
from app.models.project import Project
from app.models.session import AuthSession
from app.models.todo import Todo
from app.models.user import User

__all__ = ["AuthSession", "Label", "Notification", "PasswordReset", "Project", "Todo", "User"]
