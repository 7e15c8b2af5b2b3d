"""Configuration settings for Taskboard."""

import os
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./taskboard.db")

    # Passwords
    BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

    # Sessions
    SESSION_TTL_HOURS: int = int(os.getenv("SESSION_TTL_HOURS", "24"))
    REMEMBER_ME_TTL_DAYS: int = int(os.getenv("REMEMBER_ME_TTL_DAYS", "30"))
    COOKIE_SECURE: bool = os.getenv("COOKIE_SECURE", "false").lower() == "true"

    # Password reset
    PASSWORD_RESET_TTL_MINUTES: int = int(os.getenv("PASSWORD_RESET_TTL_MINUTES", "60"))
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:5173")

    # Application
    APP_ENV: str = os.getenv("APP_ENV", "development")
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    @property
    def session_ttl_ms(self) -> int:
        return self.SESSION_TTL_HOURS * 60 * 60 * 1000

    @property
    def remember_me_ttl_ms(self) -> int:
        return self.REMEMBER_ME_TTL_DAYS * 24 * 60 * 60 * 1000

    @property
    def password_reset_ttl_ms(self) -> int:
        return self.PASSWORD_RESET_TTL_MINUTES * 60 * 1000

    def validate(self) -> list[str]:
        """Validate settings and return list of warnings."""
        warnings = []
        if self.APP_ENV == "production" and not self.COOKIE_SECURE:
            warnings.append("COOKIE_SECURE is disabled - session cookies will be sent over plain HTTP")
        if self.BCRYPT_ROUNDS < 10:
            warnings.append(f"BCRYPT_ROUNDS={self.BCRYPT_ROUNDS} is below the recommended minimum of 10")
        return warnings


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
