"""
Dependencies for dependency injection in routes.
"""
from app.dependencies.auth import (
    AdminRequired,
    LoginRequired,
    SignupUnavailable,
    get_auth_service,
    get_current_user,
    require_admin,
    require_authentication,
    require_username_available,
)

__all__ = [
    "AdminRequired",
    "LoginRequired",
    "SignupUnavailable",
    "get_auth_service",
    "get_current_user",
    "require_admin",
    "require_authentication",
    "require_username_available",
]
