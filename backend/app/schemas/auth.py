"""
Authentication request/response schemas.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from app.models.password_reset import ResetKeyStatus


class LoginRequest(BaseModel):
    """Login request body."""
    username: str = Field(..., min_length=1, description="Username")
    password: str = Field(..., description="User password")


class LoginResponse(BaseModel):
    """Login response; the session cookie carries the login state."""
    user_id: str = Field(..., description="Authenticated user ID")
    username: str = Field(..., description="Authenticated username")
    is_admin: bool = Field(default=False, description="Administrator flag")
    message: str = Field(default="Login successful", description="Success message")


class RegisterRequest(BaseModel):
    """Signup request body."""
    username: str = Field(..., min_length=1, max_length=64, description="Desired username")
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(
        ...,
        min_length=8,
        description="User password (min 8 characters)"
    )
    password_confirm: str = Field(..., description="Password confirmation")
    security_question: str = Field(..., min_length=1, description="Security question for resets")
    security_answer: str = Field(..., min_length=1, description="Answer to the security question")

    def passwords_match(self) -> bool:
        """Check if password and confirmation match."""
        return self.password == self.password_confirm


class RegisterResponse(BaseModel):
    """Signup response."""
    user_id: str = Field(..., description="Created user ID")
    username: str = Field(..., description="Registered username")
    activation_key: str = Field(..., description="Key to pass to the activation endpoint")
    message: str = Field(
        default="Registration successful, activation pending",
        description="Success message"
    )


class ActivationResponse(BaseModel):
    """Account activation response."""
    activated: bool = Field(..., description="Whether the account was activated by this call")
    message: str = Field(..., description="Result message")


class ResetKeyRequest(BaseModel):
    """Request a password reset key."""
    username: str = Field(..., min_length=1, description="Username")
    security_question: str = Field(..., description="Security question on record")
    security_answer: str = Field(..., description="Answer on record")


class ResetKeyRequestResponse(BaseModel):
    message: str = Field(
        default="A reset link has been mailed to the address on record",
        description="Result message"
    )


class ResetKeyStatusResponse(BaseModel):
    """Reset key validation result."""
    status: ResetKeyStatus = Field(..., description="success, failure, used or invalid_key")


class ResetPasswordRequest(BaseModel):
    """New password for a reset key."""
    new_password: str = Field(..., min_length=8, description="New password (min 8 characters)")
    new_password_confirm: str = Field(..., description="New password confirmation")

    def passwords_match(self) -> bool:
        return self.new_password == self.new_password_confirm


class UserInfoResponse(BaseModel):
    """Current user information response."""
    id: str = Field(..., description="User ID")
    username: str = Field(..., description="Username")
    email: Optional[str] = Field(None, description="User email")
    auth_source: str = Field(..., description="local or ldap")
    is_admin: bool = Field(..., description="Administrator flag")
    last_seen: Optional[datetime] = Field(None, description="Last feedback log visit")
    created_at: datetime = Field(..., description="Account creation timestamp")
