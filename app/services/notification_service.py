"""Notification service

Notifications are Firestore documents read by the recipient's inbox. When a
recipient has FCM device tokens on their Users document, a push is sent as
well (best-effort, through firebase_admin.messaging).
"""

from typing import Optional, Dict, List
from datetime import datetime, UTC
import asyncio
import logging

from app.models.collections import COLLECTION_NOTIFICATIONS, COLLECTION_USERS
from app.models.notification import (
    Notification,
    firestore_notification_to_model,
    notification_model_to_firestore,
)
from app.services.firebase_service import firebase_service

logger = logging.getLogger(__name__)


class NotificationService:
    """Inbox storage plus a thin wrapper to send FCM notifications."""

    # ============================================
    # INBOX
    # ============================================

    async def create(
        self,
        recipient_uid: str,
        message: str,
        type: Optional[str] = None,
        org_name: str = "",
        org_profile_pic: str = "",
        task_id: Optional[str] = None,
    ) -> Notification:
        notification = Notification(
            id="",
            recipient_uid=recipient_uid,
            type=type,
            message=message,
            read=False,
            timestamp=datetime.now(UTC),
            org_name=org_name,
            org_profile_pic=org_profile_pic,
            task_id=task_id,
        )
        notification.id = await firebase_service.add_document(
            COLLECTION_NOTIFICATIONS, notification_model_to_firestore(
                notification)
        )
        logger.info(f"Notification {notification.id} created for {recipient_uid}")

        await self.send_to_user(
            recipient_uid, title=org_name or "New notification", body=message,
            data={"notificationId": notification.id},
        )
        return notification

    async def list_for_user(self, uid: str) -> List[Notification]:
        """Recipient's notifications, newest first"""
        docs, _ = await firebase_service.query_collection(
            COLLECTION_NOTIFICATIONS, filters=[("recipientUid", "==", uid)]
        )
        notifications = []
        for doc_id, data in docs:
            try:
                notifications.append(
                    firestore_notification_to_model(data, doc_id))
            except Exception as e:
                logger.warning(f"Skipping notification {doc_id}: {e}")
        # Sorted here rather than with order_by to avoid a composite index.
        notifications.sort(
            key=lambda n: n.timestamp or datetime.min.replace(tzinfo=UTC), reverse=True
        )
        return notifications

    async def get_owned(self, uid: str, notification_id: str) -> Optional[Notification]:
        """The notification if it exists and belongs to ``uid``"""
        data = await firebase_service.get_document(
            f"{COLLECTION_NOTIFICATIONS}/{notification_id}")
        if data is None or data.get("recipientUid") != uid:
            return None
        return firestore_notification_to_model(data, notification_id)

    async def mark_read(self, uid: str, notification_id: str) -> Optional[Notification]:
        notification = await self.get_owned(uid, notification_id)
        if notification is None:
            return None
        await firebase_service.update_document(
            f"{COLLECTION_NOTIFICATIONS}/{notification_id}", {"read": True}
        )
        notification.read = True
        return notification

    async def mark_all_read(self, uid: str) -> int:
        notifications = await self.list_for_user(uid)
        unread = [n for n in notifications if not n.read]
        return await firebase_service.batch_update(
            (f"{COLLECTION_NOTIFICATIONS}/{n.id}", {"read": True}) for n in unread
        )

    async def delete(self, uid: str, notification_id: str) -> bool:
        notification = await self.get_owned(uid, notification_id)
        if notification is None:
            return False
        await firebase_service.delete_document(
            f"{COLLECTION_NOTIFICATIONS}/{notification_id}")
        return True

    async def delete_many(self, uid: str, notification_ids: List[str]) -> int:
        """Delete the selected notifications; ids not owned by ``uid`` are ignored"""
        owned = []
        for notification_id in dict.fromkeys(notification_ids):
            if await self.get_owned(uid, notification_id) is not None:
                owned.append(f"{COLLECTION_NOTIFICATIONS}/{notification_id}")
        return await firebase_service.batch_delete(owned)

    # ============================================
    # PUSH (FCM)
    # ============================================

    async def send_to_tokens(
        self,
        tokens: List[str],
        title: str,
        body: str,
        data: Optional[Dict[str, str]] = None,
    ) -> None:
        if not tokens:
            return
        try:
            from firebase_admin import messaging

            message = messaging.MulticastMessage(
                tokens=tokens,
                notification=messaging.Notification(title=title, body=body),
                data=data or {},
            )
            await asyncio.to_thread(messaging.send_each_for_multicast, message)
        except Exception as e:
            # best-effort; don't raise to avoid breaking core flows
            logger.warning(f"Push notification failed: {e}")

    async def send_to_user(
        self, uid: str, title: str, body: str, data: Optional[Dict[str, str]] = None
    ) -> None:
        # FCM tokens are stored on the Users document as 'fcmTokens'
        try:
            user = await firebase_service.get_document(f"{COLLECTION_USERS}/{uid}")
            tokens = (user or {}).get("fcmTokens") or []
            if tokens:
                await self.send_to_tokens(tokens, title, body, data)
        except Exception as e:
            logger.warning(f"Could not push to {uid}: {e}")


# single instance exported for app usage
notification_service = NotificationService()
