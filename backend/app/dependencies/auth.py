"""
Session-based dependencies for route protection.
"""
from typing import Annotated

from fastapi import Depends, Request

from app.core.errors import NOT_LOGGED_IN, SIGNUP_ALREADY_EXISTS
from app.database.connections import get_mongo_client
from app.database.databases import auth_db
from app.models.user import User
from app.services.auth_service import AuthService


class LoginRequired(Exception):
    """Raised when a protected route is hit without a logged-in session."""


class SignupUnavailable(Exception):
    """Raised when a signup form reuses an existing username."""


class AdminRequired(Exception):
    """Raised when a non-administrator requests an admin route."""

    def __init__(self, xhr: bool = False):
        super().__init__("Administrator access required")
        self.xhr = xhr


async def get_auth_service() -> AuthService:
    """Dependency to get AuthService instance."""
    client = await get_mongo_client()
    db = client[auth_db.DB_NAME]
    return AuthService(db)


def is_xhr(request: Request) -> bool:
    return request.headers.get("X-Requested-With", "").lower() == "xmlhttprequest"


async def require_authentication(request: Request) -> str:
    """
    Dependency ensuring the session belongs to a logged-in user.

    Returns:
        The session username

    Raises:
        LoginRequired: Rendered as a redirect to the login page
    """
    username = request.session.get("user")
    if not username:
        request.session["error"] = NOT_LOGGED_IN
        raise LoginRequired()
    return username


async def require_admin(request: Request) -> str:
    """
    Dependency ensuring the session belongs to an administrator.

    Raises:
        AdminRequired: Rendered as 403, JSON for XHR requests and HTML otherwise
    """
    if not request.session.get("is_admin"):
        raise AdminRequired(xhr=is_xhr(request))
    return request.session.get("user")


async def require_username_available(
    request: Request,
    auth_service: AuthService = Depends(get_auth_service),
) -> None:
    """
    Signup dependency that rejects usernames already in use.

    Raises:
        SignupUnavailable: Rendered as a redirect back to the signup page
    """
    try:
        payload = await request.json()
    except ValueError:
        # Malformed bodies are left to request validation
        return
    username = payload.get("username") if isinstance(payload, dict) else None
    if not isinstance(username, str) or not username:
        return

    if await auth_service.username_exists(username):
        request.session["error"] = SIGNUP_ALREADY_EXISTS
        raise SignupUnavailable()


async def get_current_user(
    request: Request,
    username: Annotated[str, Depends(require_authentication)],
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    """
    Dependency to load the logged-in user's record.

    Raises:
        LoginRequired: If the session user no longer exists
    """
    user = await auth_service.get_user_by_username(username)
    if user is None:
        request.session["error"] = NOT_LOGGED_IN
        raise LoginRequired()
    return user


# Type alias for cleaner route signatures
CurrentUser = Annotated[User, Depends(get_current_user)]
SessionUser = Annotated[str, Depends(require_authentication)]
AdminUser = Annotated[str, Depends(require_admin)]
