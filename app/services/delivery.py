"""Out-of-band delivery of password reset tokens."""

import logging
from typing import Protocol

from app.config import get_settings
from app.models.user import User

logger = logging.getLogger("taskboard")


class ResetTokenDelivery(Protocol):
    """Anything that can hand a reset token to the account owner."""

    def deliver(self, user: User, token: str) -> None: ...


class LoggingResetTokenDelivery:
    """Writes the reset link to the application log instead of sending mail."""

    def __init__(self, frontend_url: str | None = None) -> None:
        self.frontend_url = (frontend_url or get_settings().FRONTEND_URL).rstrip("/")

    def reset_link(self, token: str) -> str:
        return f"{self.frontend_url}/reset-password?token={token}"

    def deliver(self, user: User, token: str) -> None:
        logger.info("PASSWORD RESET for user %s: %s", user.id, self.reset_link(token))


_delivery: ResetTokenDelivery | None = None


def get_reset_token_delivery() -> ResetTokenDelivery:
    """Get singleton reset token delivery instance."""
    global _delivery
    if _delivery is None:
        _delivery = LoggingResetTokenDelivery()
    return _delivery
