"""Password hashing service."""

import bcrypt

from app.config import get_settings
from app.errors import WeakPasswordError

# bcrypt only reads the first 72 bytes of its input.
MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """Salted bcrypt hashing with a configurable cost factor."""

    def __init__(self, rounds: int | None = None) -> None:
        self.rounds = rounds if rounds is not None else get_settings().BCRYPT_ROUNDS

    def hash(self, plaintext: str) -> str:
        """Hash a password. Each call uses a fresh salt.

        Raises WeakPasswordError if the password is empty or over 72 UTF-8 bytes.
        """
        self.validate_strength(plaintext)
        return bcrypt.hashpw(plaintext.encode("utf-8"), bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, plaintext: str, digest: str) -> bool:
        """Check a password against a stored digest. A malformed digest never matches."""
        try:
            return bcrypt.checkpw(plaintext.encode("utf-8"), digest.encode("utf-8"))
        except ValueError:
            return False

    def validate_strength(self, plaintext: str) -> None:
        if not plaintext:
            raise WeakPasswordError("Password cannot be empty")
        if len(plaintext.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise WeakPasswordError(f"Password cannot exceed {MAX_PASSWORD_BYTES} bytes")


_password_hasher: PasswordHasher | None = None


def get_password_hasher() -> PasswordHasher:
    """Get singleton password hasher instance."""
    global _password_hasher
    if _password_hasher is None:
        _password_hasher = PasswordHasher()
    return _password_hasher
