"""
User model for authentication database.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class AuthSource(str, Enum):
    """Where a user's credentials are verified."""
    LOCAL = "local"
    LDAP = "ldap"


class User(BaseModel):
    """
    User document model for MongoDB auth_db.users collection.
    """
    id: Optional[str] = Field(None, alias="_id", description="MongoDB ObjectId as string")
    username: str = Field(..., description="Unique lower-case username")
    email: Optional[EmailStr] = Field(None, description="Address for reset mails")
    hashed_password: Optional[str] = Field(
        None,
        description="Bcrypt hashed password (unset for LDAP users)"
    )
    auth_source: AuthSource = Field(
        default=AuthSource.LOCAL,
        description="Credential store for this user"
    )
    activated: bool = Field(
        default=False,
        description="Whether the account has been activated"
    )
    is_admin: bool = Field(default=False, description="Administrator flag")
    security_question: Optional[str] = Field(None, description="Reset security question")
    security_answer: Optional[str] = Field(None, description="Reset security answer")
    last_seen: Optional[datetime] = Field(
        None,
        description="Last time the user viewed the feedback log"
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Account creation timestamp"
    )

    class Config:
        populate_by_name = True
        use_enum_values = True
