"""
Failed-login tracking and account lockout backed by Redis.

Key patterns:
- "failed_login:{username}" counter, expires after the rate limit window
- "lockout:{username}" flag, expires after the lockout duration
"""
from app.config import get_settings
from app.database.connections import get_redis_client


async def increment_failed_login(username: str) -> int:
    """
    Increment failed login attempts counter for a user.

    Args:
        username: Lower-case username

    Returns:
        Current number of failed attempts
    """
    settings = get_settings()
    redis = await get_redis_client()
    key = f"failed_login:{username}"
    count = await redis.incr(key)
    if count == 1:
        await redis.expire(key, settings.login_rate_limit_window_seconds)
    return count


async def check_user_lockout(username: str) -> bool:
    """
    Check if a user is currently locked out due to too many failed attempts.

    Args:
        username: Lower-case username

    Returns:
        True if user is locked out, False otherwise
    """
    redis = await get_redis_client()
    return bool(await redis.exists(f"lockout:{username}"))


async def set_user_lockout(username: str, duration_minutes: int) -> None:
    """
    Lock out a user for a specified duration.

    Args:
        username: Lower-case username
        duration_minutes: Lockout duration in minutes
    """
    redis = await get_redis_client()
    await redis.setex(f"lockout:{username}", duration_minutes * 60, "1")


async def reset_failed_attempts(username: str) -> None:
    """
    Reset failed login attempts counter after successful login.

    Args:
        username: Lower-case username
    """
    redis = await get_redis_client()
    await redis.delete(f"failed_login:{username}")


async def clear_user_lockout(username: str) -> None:
    """
    Drop both the lockout flag and the failed attempts counter.

    Args:
        username: Lower-case username
    """
    redis = await get_redis_client()
    await redis.delete(f"lockout:{username}", f"failed_login:{username}")
