"""
API Router for the notification inbox
"""

import logging

from fastapi import APIRouter, HTTPException, status, Depends
from typing import List

from app.dependencies import get_current_user
from app.models.notification import Notification
from app.models.user import User
from app.schemas.notification import NotificationIds, CountResponse
from app.services.notification_service import notification_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/notifications", tags=["Notifications"])


@router.get("", response_model=List[Notification])
async def list_notifications(current_user: User = Depends(get_current_user)):
    """Notifications of the current user, newest first"""
    return await notification_service.list_for_user(current_user.uid)


@router.put("/read-all", response_model=CountResponse)
async def mark_all_read(current_user: User = Depends(get_current_user)):
    try:
        count = await notification_service.mark_all_read(current_user.uid)
        return CountResponse(count=count)
    except Exception as e:
        logger.error(f"Failed to mark notifications read for {current_user.uid}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update notifications",
        )


@router.post("/delete", response_model=CountResponse)
async def delete_selected(
    payload: NotificationIds,
    current_user: User = Depends(get_current_user),
):
    """Delete several notifications; ids that are not the user's are ignored"""
    count = await notification_service.delete_many(current_user.uid, payload.ids)
    return CountResponse(count=count)


@router.put("/{notification_id}/read", response_model=Notification)
async def mark_read(notification_id: str, current_user: User = Depends(get_current_user)):
    notification = await notification_service.mark_read(current_user.uid, notification_id)
    if notification is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found"
        )
    return notification


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(notification_id: str, current_user: User = Depends(get_current_user)):
    if not await notification_service.delete(current_user.uid, notification_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found"
        )
