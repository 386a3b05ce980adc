"""
Feedback entry model.
"""
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field


class Feedback(BaseModel):
    """
    Feedback document model for MongoDB auth_db.feedback collection.
    """
    id: Optional[str] = Field(None, alias="_id", description="MongoDB ObjectId as string")
    user_id: Optional[str] = Field(None, description="Author user ID")
    username: Optional[str] = Field(None, description="Author username, populated on read")
    feedback_data: dict[str, Any] = Field(default_factory=dict, description="Submitted form data")
    date: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Submission timestamp"
    )

    class Config:
        populate_by_name = True
