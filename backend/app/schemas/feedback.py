"""
Feedback request/response schemas.
"""
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field


class FeedbackCreate(BaseModel):
    """Feedback form post."""
    feedback_data: dict[str, Any] = Field(..., description="Submitted form fields")


class FeedbackCreateResponse(BaseModel):
    id: str = Field(..., description="Stored feedback ID")
    message: str = Field(default="Thank you for your feedback", description="Success message")


class FeedbackEntryResponse(BaseModel):
    """Single feedback entry with its author."""
    id: str = Field(..., description="Feedback ID")
    user_id: Optional[str] = Field(None, description="Author user ID")
    username: Optional[str] = Field(None, description="Author username")
    feedback_data: dict[str, Any] = Field(..., description="Submitted form fields")
    date: datetime = Field(..., description="Submission timestamp")


class FeedbackListResponse(BaseModel):
    """Feedback entries, newest first."""
    feedback: list[FeedbackEntryResponse] = Field(..., description="Feedback entries")
    total: int = Field(..., description="Number of entries")


class UnreadFeedbackResponse(BaseModel):
    unread_count: int = Field(..., description="Entries submitted since last visit")
    last_seen: Optional[datetime] = Field(None, description="Previous visit timestamp")
