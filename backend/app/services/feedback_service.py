"""
Feedback service for storing and reviewing user feedback.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.database.databases import auth_db
from app.models.feedback import Feedback

logger = logging.getLogger(__name__)


class FeedbackService:
    """Service for feedback operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.feedback_collection = db[auth_db.Collections.FEEDBACK]
        self.users_collection = db[auth_db.Collections.USERS]

    async def save_feedback(self, username: str, feedback_data: dict[str, Any]) -> str:
        """
        Save a feedback form post.

        Args:
            username: Author's username; unknown names are stored without a user ID
            feedback_data: Submitted form fields

        Returns:
            The stored feedback ID
        """
        user_doc = await self.users_collection.find_one(
            {"username": username.lower()}, {"_id": 1}
        )
        doc = {
            "user_id": user_doc["_id"] if user_doc else None,
            "feedback_data": feedback_data,
            "date": datetime.now(timezone.utc),
        }
        result = await self.feedback_collection.insert_one(doc)

        logger.info(
            f"FEEDBACK - FORM POST - DATA SAVED IN DB "
            f"(username={username}, feedback_id={result.inserted_id})"
        )
        return str(result.inserted_id)

    async def get_feedback_data(self) -> list[Feedback]:
        """
        Get all feedback, newest first, with the author's username filled in.
        """
        cursor = self.feedback_collection.find({}).sort("date", -1)
        docs = await cursor.to_list(length=None)

        user_ids = list({doc["user_id"] for doc in docs if doc.get("user_id") is not None})
        usernames = {}
        if user_ids:
            users_cursor = self.users_collection.find(
                {"_id": {"$in": user_ids}}, {"username": 1}
            )
            async for user in users_cursor:
                usernames[user["_id"]] = user.get("username")

        entries = []
        for doc in docs:
            user_id = doc.get("user_id")
            entries.append(Feedback(
                _id=str(doc["_id"]),
                user_id=str(user_id) if user_id is not None else None,
                username=usernames.get(user_id),
                feedback_data=doc.get("feedback_data") or {},
                date=doc["date"],
            ))
        return entries

    async def get_unread_feedback_count(self, last_seen: Optional[datetime]) -> int:
        """
        Count feedback submitted at or after ``last_seen``.

        A user who has never looked at the feedback log has everything unread.
        """
        query = {}
        if last_seen is not None:
            # Stored dates come back as naive UTC
            if last_seen.tzinfo is not None:
                last_seen = last_seen.astimezone(timezone.utc).replace(tzinfo=None)
            query = {"date": {"$gte": last_seen}}
        count = await self.feedback_collection.count_documents(query)
        return count or 0
