"""
Event service: event CRUD, like/interest engagement, comments and images
"""

import logging
from datetime import datetime, UTC
from typing import Optional, List, Dict, Any, Literal

from app.models.collections import COLLECTION_EVENTS, COLLECTION_COMMENTS, COLLECTION_USERS
from app.models.event import (
    Comment,
    Event,
    comment_model_to_firestore,
    event_model_to_firestore,
    firestore_comment_to_model,
    firestore_event_to_model,
)
from app.models.status import EventStatus
from app.models.user import User
from app.schemas.event import EngagementResponse
from app.services.firebase_service import firebase_service
from app.services.storage_service import storage_service, event_image_key

logger = logging.getLogger(__name__)

# Firestore caps the value list of an 'in' filter.
IN_QUERY_LIMIT = 30

EngagementKind = Literal["like", "interest"]

# kind -> (event array field, user array field, older event array field)
ENGAGEMENT_FIELDS = {
    "like": ("likes", "likedEvents", "likedBy"),
    "interest": ("interested", "interestedEvents", "interestedBy"),
}


def _sort_key(event: Event):
    value = event.event_date
    if value is None:
        return datetime.max.replace(tzinfo=UTC)
    return value if value.tzinfo else value.replace(tzinfo=UTC)


class EventService:
    """Service for events and their engagement"""

    def _to_models(self, docs) -> List[Event]:
        events = []
        for doc_id, data in docs:
            try:
                events.append(firestore_event_to_model(data, doc_id))
            except Exception as e:
                logger.warning(f"Skipping event {doc_id}: {e}")
        return events

    async def _query_accepted(self, filters: Optional[list] = None) -> List[Event]:
        """Accepted events, including older documents that only carry approvalStatus"""
        found: Dict[str, Dict[str, Any]] = {}
        for status_filter in (
            ("status", "==", EventStatus.ACCEPTED.value),
            ("approvalStatus", "==", "approved"),
        ):
            docs, _ = await firebase_service.query_collection(
                COLLECTION_EVENTS, filters=(filters or []) + [status_filter])
            for doc_id, data in docs:
                found.setdefault(doc_id, data)
        return [
            e for e in self._to_models(found.items())
            if e.status == EventStatus.ACCEPTED
        ]

    async def get_event(self, event_id: str) -> Optional[Event]:
        data = await firebase_service.get_document(f"{COLLECTION_EVENTS}/{event_id}")
        if data is None:
            return None
        return firestore_event_to_model(data, event_id)

    async def create_event(self, organization_id: str, payload: Dict[str, Any]) -> Event:
        """Store a new event as pending with no engagement"""
        event = Event(
            uid="",
            organization_id=organization_id,
            status=EventStatus.PENDING,
            likes=[],
            interested=[],
            event_images=[],
            created_at=datetime.now(UTC),
            **payload,
        )
        event.uid = await firebase_service.add_document(
            COLLECTION_EVENTS, event_model_to_firestore(event))
        logger.info(f"Event {event.uid} created for organization {organization_id}")
        return event

    async def list_public_events(
        self, search: Optional[str] = None, tag: Optional[str] = None
    ) -> List[Event]:
        """Accepted events, soonest first"""
        events = await self._query_accepted()
        if search:
            needle = search.lower()
            events = [
                e for e in events
                if needle in e.event_name.lower() or needle in e.event_location.lower()
            ]
        if tag:
            wanted = tag.lower()
            events = [e for e in events if wanted in (t.lower() for t in e.tags)]
        events.sort(key=_sort_key)
        return events

    async def list_for_organizations(
        self, organization_ids: List[str], accepted_only: bool = True
    ) -> List[Event]:
        """Events of several organizations, queried in chunks"""
        ids = list(dict.fromkeys(organization_ids))
        events: List[Event] = []
        for start in range(0, len(ids), IN_QUERY_LIMIT):
            filters = [("organizationId", "in", ids[start:start + IN_QUERY_LIMIT])]
            if accepted_only:
                events.extend(await self._query_accepted(filters))
            else:
                docs, _ = await firebase_service.query_collection(
                    COLLECTION_EVENTS, filters=filters)
                events.extend(self._to_models(docs))
        events.sort(key=_sort_key)
        return events

    async def list_for_organization(self, organization_id: str) -> List[Event]:
        """Every event of one organization, whatever its status"""
        docs, _ = await firebase_service.query_collection(
            COLLECTION_EVENTS, filters=[("organizationId", "==", organization_id)]
        )
        events = self._to_models(docs)
        events.sort(key=_sort_key)
        return events

    async def update_event(self, event: Event, updates: Dict[str, Any]) -> Event:
        """Apply edits; status and engagement are not editable here"""
        changes = {k: v for k, v in updates.items() if v is not None}
        for protected in ("status", "likes", "interested", "organizationId", "rejectionReason"):
            changes.pop(protected, None)
        if not changes:
            return event
        await firebase_service.update_document(
            f"{COLLECTION_EVENTS}/{event.uid}", changes)
        logger.info(f"Event {event.uid} updated: {sorted(changes)}")
        merged = {**event_model_to_firestore(event), **changes}
        return firestore_event_to_model(merged, event.uid)

    async def delete_event(self, event_id: str) -> None:
        await firebase_service.delete_document(f"{COLLECTION_EVENTS}/{event_id}")
        logger.info(f"Event {event_id} deleted")

    async def toggle_engagement(
        self, event: Event, user: User, kind: EngagementKind
    ) -> EngagementResponse:
        """
        Flip the user's like or interest on an accepted event.

        The user document and the event document are updated one after the
        other, without a transaction. Removing also clears the user from the
        older ``likedBy``/``interestedBy`` array, since reads merge it in.

        Raises:
            ValueError: the event is not accepted
        """
        if event.status != EventStatus.ACCEPTED:
            raise ValueError("Only accepted events can be liked or marked as interested")

        event_field, user_field, legacy_field = ENGAGEMENT_FIELDS[kind]
        current = list(getattr(event, event_field))
        active = user.uid not in current

        user_path = f"{COLLECTION_USERS}/{user.uid}"
        event_path = f"{COLLECTION_EVENTS}/{event.uid}"
        if active:
            await firebase_service.array_union(user_path, user_field, [event.uid])
            await firebase_service.array_union(event_path, event_field, [user.uid])
            current.append(user.uid)
        else:
            await firebase_service.array_remove(user_path, user_field, [event.uid])
            await firebase_service.array_remove(event_path, event_field, [user.uid])
            stored = await firebase_service.get_document(event_path) or {}
            if isinstance(stored.get(legacy_field), list) and user.uid in stored[legacy_field]:
                await firebase_service.array_remove(event_path, legacy_field, [user.uid])
            current = [uid for uid in current if uid != user.uid]

        logger.info(
            f"User {user.uid} {'added' if active else 'removed'} {kind} on event {event.uid}")
        return EngagementResponse(event_id=event.uid, active=active, count=len(current))

    async def add_images(
        self, event: Event, files: List[tuple[Optional[str], bytes, Optional[str]]]
    ) -> List[str]:
        """
        Upload images and append their URLs to the event.

        Args:
            files: (filename, content, content_type) triples
        """
        urls = []
        for filename, content, content_type in files:
            urls.append(await storage_service.upload_bytes(
                event_image_key(filename), content, content_type))
        if urls:
            try:
                await firebase_service.array_union(
                    f"{COLLECTION_EVENTS}/{event.uid}", "eventImages", urls)
            except Exception as e:
                logger.error(
                    f"Uploaded {len(urls)} image(s) but event {event.uid} was not updated: {e}")
                raise
        return event.event_images + [u for u in urls if u not in event.event_images]

    # ============================================
    # COMMENTS
    # ============================================

    async def list_comments(self, event_id: str) -> List[Comment]:
        docs, _ = await firebase_service.query_collection(
            COLLECTION_COMMENTS, filters=[("eventId", "==", event_id)]
        )
        comments = []
        for doc_id, data in docs:
            try:
                comments.append(firestore_comment_to_model(data, doc_id))
            except Exception as e:
                logger.warning(f"Skipping comment {doc_id}: {e}")
        comments.sort(key=lambda c: c.timestamp or datetime.min.replace(tzinfo=UTC))
        return comments

    async def add_comment(self, event_id: str, user: User, text: str) -> Comment:
        comment = Comment(
            uid="",
            event_id=event_id,
            comment=text,
            replies=[],
            user_name=user.full_name or "Anonymous",
            user_email=user.email or None,
            timestamp=datetime.now(UTC),
        )
        comment.uid = await firebase_service.add_document(
            COLLECTION_COMMENTS, comment_model_to_firestore(comment))
        logger.info(f"Comment {comment.uid} added to event {event_id} by {user.uid}")
        return comment

    async def add_reply(self, comment_id: str, text: str) -> Optional[Comment]:
        """Append a reply; identical replies are kept as separate entries"""

        def append(data: Dict[str, Any]) -> Dict[str, Any]:
            replies = data.get("replies")
            return {"replies": (replies if isinstance(replies, list) else []) + [text]}

        updated = await firebase_service.transition_document(
            f"{COLLECTION_COMMENTS}/{comment_id}", append)
        if updated is None:
            return None
        logger.info(f"Reply added to comment {comment_id}")
        return firestore_comment_to_model(updated, comment_id)


event_service = EventService()
