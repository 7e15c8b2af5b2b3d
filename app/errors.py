"""Service errors.

Every error carries a stable ``kind`` for programmatic handling and a
human-readable ``message``. The HTTP layer maps them to status codes in
``main.py``; services only raise.
"""


class AuthError(Exception):
    """Base exception for all account and session errors."""

    kind = "AuthError"
    status_code = 400

    def __init__(self, message: str = "Authentication error"):
        self.message = message
        super().__init__(self.message)


class EmailTakenError(AuthError):
    """Raised when an email is already registered to another user."""

    kind = "EmailTaken"
    status_code = 409

    def __init__(self, message: str = "A user with this email already exists"):
        super().__init__(message)


class InvalidCredentialsError(AuthError):
    """Raised for an unknown email, a wrong password, or a wrong current password."""

    kind = "InvalidCredentials"
    status_code = 401

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


class AccountDisabledError(AuthError):
    """Raised when the user exists but has been deactivated."""

    kind = "AccountDisabled"
    status_code = 403

    def __init__(self, message: str = "Account is deactivated"):
        super().__init__(message)


class UnauthenticatedError(AuthError):
    """Raised when an operation requires a valid session and none was presented."""

    kind = "Unauthenticated"
    status_code = 401

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class NotFoundError(AuthError):
    """Raised when a referenced entity does not exist."""

    kind = "NotFound"
    status_code = 404

    def __init__(self, message: str = "Not found"):
        super().__init__(message)


class InvalidOrExpiredTokenError(AuthError):
    """Raised when a reset token is unknown, already used, or past expiry."""

    kind = "InvalidOrExpiredToken"
    status_code = 400

    def __init__(self, message: str = "Invalid or expired reset token"):
        super().__init__(message)


class WeakPasswordError(AuthError):
    """Raised when a new password is empty or longer than bcrypt can hash."""

    kind = "WeakPassword"
    status_code = 422

    def __init__(self, message: str = "Password does not meet requirements"):
        super().__init__(message)


class ConflictError(AuthError):
    """Raised when a change clashes with existing rows, such as a duplicate label name."""

    kind = "Conflict"
    status_code = 409

    def __init__(self, message: str = "Conflicts with existing data"):
        super().__init__(message)
