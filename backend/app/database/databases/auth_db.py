"""
Auth database configuration.
Stores user identity, password reset tickets and feedback entries.
"""

DB_NAME = "auth_db"


class Collections:
    """Collection names in auth_db."""
    USERS = "users"
    PASSWORD_RESETS = "password_resets"
    FEEDBACK = "feedback"
    METADATA = "_metadata"


# Manifest for registry
DB_MANIFEST = {
    "db_name": DB_NAME,
    "purpose": "User authentication, password resets and feedback",
    "collections": [
        Collections.USERS,
        Collections.PASSWORD_RESETS,
        Collections.FEEDBACK,
        Collections.METADATA,
    ],
    "access_level": "restricted",
}
