"""
Pydantic models for database documents and data structures.
"""
from app.models.user import User, AuthSource
from app.models.password_reset import PasswordReset, ResetKeyStatus
from app.models.feedback import Feedback

__all__ = [
    "User",
    "AuthSource",
    "PasswordReset",
    "ResetKeyStatus",
    "Feedback",
]
