"""
Feedback router: users post feedback, administrators review it.
"""
from fastapi import APIRouter, Depends, HTTPException, status

from app.core.errors import AuthError
from app.database.connections import get_mongo_client
from app.database.databases import auth_db
from app.dependencies.auth import AdminUser, SessionUser, get_auth_service
from app.schemas.feedback import (
    FeedbackCreate,
    FeedbackCreateResponse,
    FeedbackEntryResponse,
    FeedbackListResponse,
    UnreadFeedbackResponse,
)
from app.services.auth_service import AuthService
from app.services.feedback_service import FeedbackService

router = APIRouter(prefix="/feedback", tags=["Feedback"])


async def get_feedback_service() -> FeedbackService:
    """Dependency to get FeedbackService instance."""
    client = await get_mongo_client()
    db = client[auth_db.DB_NAME]
    return FeedbackService(db)


@router.post(
    "",
    response_model=FeedbackCreateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit feedback",
)
async def submit_feedback(
    username: SessionUser,
    body: FeedbackCreate,
    feedback_service: FeedbackService = Depends(get_feedback_service),
):
    feedback_id = await feedback_service.save_feedback(username, body.feedback_data)
    return FeedbackCreateResponse(id=feedback_id)


@router.get(
    "",
    response_model=FeedbackListResponse,
    summary="List feedback, newest first",
)
async def list_feedback(
    username: AdminUser,
    feedback_service: FeedbackService = Depends(get_feedback_service),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    List all feedback entries with their authors.

    Viewing the list marks everything as read for the administrator.
    """
    entries = await feedback_service.get_feedback_data()
    try:
        await auth_service.save_last_seen(username)
    except AuthError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return FeedbackListResponse(
        feedback=[
            FeedbackEntryResponse(
                id=entry.id,
                user_id=entry.user_id,
                username=entry.username,
                feedback_data=entry.feedback_data,
                date=entry.date,
            )
            for entry in entries
        ],
        total=len(entries),
    )


@router.get(
    "/unread",
    response_model=UnreadFeedbackResponse,
    summary="Count feedback since the last visit",
)
async def unread_feedback(
    username: AdminUser,
    feedback_service: FeedbackService = Depends(get_feedback_service),
    auth_service: AuthService = Depends(get_auth_service),
):
    user = await auth_service.get_user_by_username(username)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    count = await feedback_service.get_unread_feedback_count(user.last_seen)
    return UnreadFeedbackResponse(unread_count=count, last_seen=user.last_seen)
