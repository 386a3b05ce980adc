"""
Security utilities for password hashing and password reset keys.
"""
import secrets
from datetime import datetime, timezone
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.config import get_settings
from app.core.errors import InvalidResetKeyError

# Password hashing context using bcrypt
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(plain_password: str) -> str:
    """
    Hash a plain password using bcrypt.

    Args:
        plain_password: The plain text password to hash

    Returns:
        Hashed password string
    """
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """
    Verify a plain password against a hashed password.

    Args:
        plain_password: The plain text password to verify
        hashed_password: The hashed password to compare against

    Returns:
        True if password matches, False otherwise
    """
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def create_reset_key(user_id: str) -> str:
    """
    Create a signed password reset key bound to a user.

    The key carries the user ID and a random nonce so that every request
    yields a distinct key. Expiry is tracked on the stored ticket, not in
    the key itself.

    Args:
        user_id: User the key resets

    Returns:
        Encoded reset key string
    """
    settings = get_settings()

    payload = {
        "sub": user_id,
        "nonce": secrets.token_urlsafe(16),
        "iat": datetime.now(timezone.utc),
    }

    return jwt.encode(
        payload,
        settings.reset_key_secret,
        algorithm=settings.reset_key_algorithm,
    )


def decode_reset_key(reset_key: str) -> str:
    """
    Decode a reset key and return the user ID it was issued for.

    Raises:
        InvalidResetKeyError: If the key is malformed or its signature is bad
    """
    settings = get_settings()

    try:
        payload: dict[str, Any] = jwt.decode(
            reset_key,
            settings.reset_key_secret,
            algorithms=[settings.reset_key_algorithm],
        )
    except JWTError:
        raise InvalidResetKeyError()

    user_id = payload.get("sub")
    if not user_id:
        raise InvalidResetKeyError()
    return user_id
