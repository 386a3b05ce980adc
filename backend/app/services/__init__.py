"""
Service layer for business logic.
"""
from app.services.auth_service import AuthService
from app.services.feedback_service import FeedbackService

__all__ = [
    "AuthService",
    "FeedbackService",
]
