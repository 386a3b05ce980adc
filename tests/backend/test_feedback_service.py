"""
Tests for FeedbackService.
"""

from datetime import datetime, timedelta, timezone

import pytest


class TestSaveFeedback:

    @pytest.mark.asyncio
    async def test_save_feedback_links_author(
        self, feedback_service, mock_auth_db, make_user_doc
    ):
        result = await mock_auth_db.users.insert_one(make_user_doc("alice"))

        feedback_id = await feedback_service.save_feedback("Alice", {"rating": 5, "comment": "Nice"})

        stored = await mock_auth_db.feedback.find_one({})
        assert str(stored["_id"]) == feedback_id
        assert stored["user_id"] == result.inserted_id
        assert stored["feedback_data"] == {"rating": 5, "comment": "Nice"}
        assert stored["date"] is not None

    @pytest.mark.asyncio
    async def test_save_feedback_unknown_user_stores_without_author(
        self, feedback_service, mock_auth_db
    ):
        await feedback_service.save_feedback("ghost", {"comment": "Hello"})

        stored = await mock_auth_db.feedback.find_one({})
        assert stored["user_id"] is None


class TestFeedbackListing:

    @pytest.mark.asyncio
    async def test_feedback_is_sorted_newest_first_with_usernames(
        self, feedback_service, mock_auth_db, make_user_doc
    ):
        alice = await mock_auth_db.users.insert_one(make_user_doc("alice"))
        bob = await mock_auth_db.users.insert_one(make_user_doc("bob"))
        now = datetime.now(timezone.utc)
        await mock_auth_db.feedback.insert_many([
            {"user_id": alice.inserted_id, "feedback_data": {"n": 1}, "date": now - timedelta(hours=2)},
            {"user_id": bob.inserted_id, "feedback_data": {"n": 3}, "date": now},
            {"user_id": None, "feedback_data": {"n": 2}, "date": now - timedelta(hours=1)},
        ])

        entries = await feedback_service.get_feedback_data()

        assert [e.feedback_data["n"] for e in entries] == [3, 2, 1]
        assert [e.username for e in entries] == ["bob", None, "alice"]
        assert entries[0].user_id == str(bob.inserted_id)

    @pytest.mark.asyncio
    async def test_empty_feedback_log(self, feedback_service):
        assert await feedback_service.get_feedback_data() == []


class TestUnreadCount:

    @pytest.mark.asyncio
    async def test_counts_entries_since_last_seen(self, feedback_service, mock_auth_db):
        now = datetime.now(timezone.utc)
        await mock_auth_db.feedback.insert_many([
            {"user_id": None, "feedback_data": {}, "date": now - timedelta(days=2)},
            {"user_id": None, "feedback_data": {}, "date": now - timedelta(minutes=30)},
            {"user_id": None, "feedback_data": {}, "date": now - timedelta(minutes=5)},
        ])

        count = await feedback_service.get_unread_feedback_count(now - timedelta(hours=1))

        assert count == 2

    @pytest.mark.asyncio
    async def test_entry_dated_exactly_at_last_seen_is_unread(
        self, feedback_service, mock_auth_db
    ):
        seen = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
        await mock_auth_db.feedback.insert_many([
            {"user_id": None, "feedback_data": {}, "date": seen - timedelta(seconds=1)},
            {"user_id": None, "feedback_data": {}, "date": seen},
        ])

        assert await feedback_service.get_unread_feedback_count(seen) == 1

    @pytest.mark.asyncio
    async def test_nothing_new_returns_zero(self, feedback_service, mock_auth_db):
        now = datetime.now(timezone.utc)
        await mock_auth_db.feedback.insert_one(
            {"user_id": None, "feedback_data": {}, "date": now - timedelta(days=1)}
        )

        assert await feedback_service.get_unread_feedback_count(now) == 0

    @pytest.mark.asyncio
    async def test_never_seen_counts_everything(self, feedback_service, mock_auth_db):
        now = datetime.now(timezone.utc)
        await mock_auth_db.feedback.insert_many([
            {"user_id": None, "feedback_data": {}, "date": now - timedelta(days=3)},
            {"user_id": None, "feedback_data": {}, "date": now},
        ])

        assert await feedback_service.get_unread_feedback_count(None) == 2
