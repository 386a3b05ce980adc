"""
Password reset ticket model.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ResetKeyStatus(str, Enum):
    """Outcome of checking a reset key."""
    SUCCESS = "success"
    FAILURE = "failure"
    USED = "used"
    INVALID_KEY = "invalid_key"


class PasswordReset(BaseModel):
    """
    Reset ticket document for MongoDB auth_db.password_resets collection.
    """
    id: Optional[str] = Field(None, alias="_id", description="MongoDB ObjectId as string")
    reset_key: str = Field(..., description="Signed reset key mailed to the user")
    user_id: str = Field(..., description="User the key resets")
    date: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Time the key was issued"
    )
    used: bool = Field(default=False, description="Whether the key was consumed")

    class Config:
        populate_by_name = True
