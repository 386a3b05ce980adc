"""
Request and response schemas for API endpoints.
"""
from app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    ActivationResponse,
    ResetKeyRequest,
    ResetKeyRequestResponse,
    ResetKeyStatusResponse,
    ResetPasswordRequest,
    UserInfoResponse,
)
from app.schemas.feedback import (
    FeedbackCreate,
    FeedbackCreateResponse,
    FeedbackEntryResponse,
    FeedbackListResponse,
    UnreadFeedbackResponse,
)

__all__ = [
    # Auth
    "LoginRequest",
    "LoginResponse",
    "RegisterRequest",
    "RegisterResponse",
    "ActivationResponse",
    "ResetKeyRequest",
    "ResetKeyRequestResponse",
    "ResetKeyStatusResponse",
    "ResetPasswordRequest",
    "UserInfoResponse",
    # Feedback
    "FeedbackCreate",
    "FeedbackCreateResponse",
    "FeedbackEntryResponse",
    "FeedbackListResponse",
    "UnreadFeedbackResponse",
]
