"""
Database registry management.
Ensures all databases and collections are registered on startup.
"""
from datetime import datetime, timezone
from motor.motor_asyncio import AsyncIOMotorClient

from app.database.databases import auth_db

# The registry lives in its own database
REGISTRY_DB_NAME = "system_db"
REGISTRY_COLLECTION = "db_registry"

REGISTRY_DB_MANIFEST = {
    "db_name": REGISTRY_DB_NAME,
    "purpose": "Database registry",
    "collections": [REGISTRY_COLLECTION, "_metadata"],
    "access_level": "system",
}

# All database manifests
ALL_DB_MANIFESTS = [
    auth_db.DB_MANIFEST,
    REGISTRY_DB_MANIFEST,
]


async def sync_registry(client: AsyncIOMotorClient) -> None:
    """
    Synchronize the database registry on application startup.
    Ensures all databases are registered in system_db.db_registry.
    """
    registry_collection = client[REGISTRY_DB_NAME][REGISTRY_COLLECTION]

    for manifest in ALL_DB_MANIFESTS:
        db_name = manifest["db_name"]
        now = datetime.now(timezone.utc)

        await registry_collection.update_one(
            {"_id": db_name},
            {
                "$set": {
                    "purpose": manifest["purpose"],
                    "collections": manifest["collections"],
                    "access_level": manifest["access_level"],
                    "schema_version": "1.0",
                    "updated_at": now,
                },
                "$setOnInsert": {"created_at": now},
            },
            upsert=True,
        )

        # Ensure _metadata collection exists in each database
        await client[db_name]["_metadata"].update_one(
            {"_id": "db_metadata"},
            {
                "$set": {"db_name": db_name, "last_updated_at": now},
                "$setOnInsert": {"created_at": now},
            },
            upsert=True,
        )


async def create_indexes(client: AsyncIOMotorClient) -> None:
    """Create indexes for the auth database."""
    db = client[auth_db.DB_NAME]

    await db[auth_db.Collections.USERS].create_index("username", unique=True)
    await db[auth_db.Collections.PASSWORD_RESETS].create_index("reset_key", unique=True)
    await db[auth_db.Collections.PASSWORD_RESETS].create_index("user_id")
    await db[auth_db.Collections.FEEDBACK].create_index([("date", -1)])
