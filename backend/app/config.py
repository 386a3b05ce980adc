"""
Application configuration loaded from environment variables.
"""
from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # MongoDB
    mongo_uri: str = "mongodb://mongodb:27017"
    mongo_server_selection_timeout_ms: int = 5000

    # Redis
    redis_host: str = "redis"
    redis_port: int = 6379

    # Sessions
    session_secret_key: str = "CHANGE_ME_IN_PRODUCTION_USE_STRONG_SECRET"
    session_max_age_seconds: int = 14 * 24 * 60 * 60
    last_user_cookie: str = "last_user"

    # Password reset keys
    reset_key_secret: str = "CHANGE_ME_IN_PRODUCTION_USE_STRONG_SECRET"
    reset_key_algorithm: str = "HS256"
    reset_validity_hours: float = 24

    # LDAP
    auth_use_ldap: bool = False
    ldap_url: str = "ldap://ldap:389"
    ldap_bind_dn: str | None = None
    ldap_bind_credentials: str | None = None
    ldap_search_base: str = "ou=people,dc=example,dc=com"
    ldap_search_filter: str = "(uid={{username}})"
    ldap_timeout_seconds: int = 5

    # Mail
    smtp_host: str = "localhost"
    smtp_port: int = 25
    mail_from: str = "no-reply@localhost"

    # Redirect targets for session gates
    login_url: str = "/login"
    signup_url: str = "/signup"
    # Page the mailed reset key links to; relative values are joined to the request host
    reset_url: str = "/auth/reset"

    # Login lockout
    login_rate_limit_window_seconds: int = 600
    user_lockout_threshold: int = 10
    user_lockout_duration_minutes: int = 30

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
