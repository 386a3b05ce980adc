"""
Core module - Security, errors, lockout, LDAP and mail utilities.
"""
from app.core.security import (
    hash_password,
    verify_password,
    create_reset_key,
    decode_reset_key,
)
from app.core.rate_limit import (
    increment_failed_login,
    check_user_lockout,
    set_user_lockout,
    reset_failed_attempts,
    clear_user_lockout,
)

__all__ = [
    "hash_password",
    "verify_password",
    "create_reset_key",
    "decode_reset_key",
    "increment_failed_login",
    "check_user_lockout",
    "set_user_lockout",
    "reset_failed_attempts",
    "clear_user_lockout",
]
