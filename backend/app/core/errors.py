"""
Authentication errors raised by the service layer.

Each error carries a stable user-facing message. Routers translate them
into HTTP responses.
"""
from typing import Optional

NOT_LOGGED_IN = "Please log in to access this page."
SIGNUP_ALREADY_EXISTS = "That username is already taken. Please choose another one."
ADMIN_REQUIRED = "Administrator access is required."


class AuthError(ValueError):
    """Base class for authentication and account errors."""

    message = "Authentication error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)

    def __str__(self) -> str:
        return self.args[0]


class InvalidUsernameError(AuthError):
    message = "Invalid username"


class InvalidPasswordError(AuthError):
    message = "Invalid password"


class ActivationPendingError(AuthError):
    message = "Account activation is pending"


class AccountLockedError(AuthError):
    message = "Account temporarily locked due to too many failed attempts"


class AuthFailedError(AuthError):
    message = "Invalid username or password"


class LDAPServerDownError(AuthError):
    message = "Authentication server is unavailable. Please try again later."


class LDAPError(AuthError):
    message = "Authentication server error"


class UsernameTakenError(AuthError):
    message = SIGNUP_ALREADY_EXISTS


class InvalidActivationKeyError(AuthError):
    message = "Invalid activation key"


class InvalidResetDetailsError(AuthError):
    message = "The details provided do not match our records"


class InvalidResetKeyError(AuthError):
    """Raised when a reset key cannot be used; ``status`` says why."""

    message = "Invalid or expired reset key"

    def __init__(self, status: str = "invalid_key", message: Optional[str] = None):
        super().__init__(message)
        self.status = status
