"""
API Router for events, engagement and comments
"""

import logging

from fastapi import APIRouter, HTTPException, status, Depends, UploadFile, File
from typing import List, Optional

from app.config import settings
from app.dependencies import (
    get_current_user,
    require_member,
    require_officer,
    ensure_officer_of,
)
from app.models.event import Event, Comment
from app.models.user import User
from app.schemas.event import (
    EventCreate,
    EventUpdate,
    EngagementResponse,
    CommentCreate,
    ReplyCreate,
    EventImagesResponse,
)
from app.services.event_service import event_service
from app.services.membership_service import membership_service
from app.services.organization_service import organization_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/events", tags=["Events"])


async def _get_event_or_404(event_id: str) -> Event:
    event = await event_service.get_event(event_id)
    if event is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Event not found"
        )
    return event


async def _ensure_owner(user: User, organization_id: str) -> None:
    organization = await organization_service.get_organization(organization_id)
    if organization is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Organization not found"
        )
    ensure_officer_of(user, organization)


@router.post("", response_model=Event, status_code=status.HTTP_201_CREATED)
async def create_event(
    event_data: EventCreate,
    current_user: User = Depends(require_officer),
):
    """Submit an event; it stays pending until an admin accepts it"""
    organization_id = event_data.organization_id or current_user.organization_id
    if not organization_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="organizationId is required"
        )
    await _ensure_owner(current_user, organization_id)
    try:
        return await event_service.create_event(
            organization_id, event_data.model_dump(exclude={"organization_id"}))
    except Exception as e:
        logger.error(f"Failed to create event for {organization_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create event",
        )


@router.get("", response_model=List[Event])
async def list_events(search: Optional[str] = None, tag: Optional[str] = None):
    """Accepted events, soonest first"""
    return await event_service.list_public_events(search=search, tag=tag)


@router.get("/feed", response_model=List[Event])
async def member_feed(current_user: User = Depends(require_member)):
    """Accepted events of the organizations the member belongs to"""
    organization_ids = await membership_service.approved_organization_ids(current_user.uid)
    return await event_service.list_for_organizations(organization_ids)


@router.get("/organization/{organization_id}", response_model=List[Event])
async def organization_events(
    organization_id: str,
    current_user: User = Depends(require_officer),
):
    """Every event of the organization, whatever its status"""
    await _ensure_owner(current_user, organization_id)
    return await event_service.list_for_organization(organization_id)


@router.post("/comments/{comment_id}/replies", response_model=Comment)
async def reply_to_comment(
    comment_id: str,
    reply_data: ReplyCreate,
    current_user: User = Depends(get_current_user),
):
    comment = await event_service.add_reply(comment_id, reply_data.reply)
    if comment is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Comment not found"
        )
    return comment


@router.get("/{event_id}", response_model=Event)
async def get_event(event_id: str):
    return await _get_event_or_404(event_id)


@router.put("/{event_id}", response_model=Event)
async def update_event(
    event_id: str,
    update_data: EventUpdate,
    current_user: User = Depends(require_officer),
):
    """Edit event details; the moderation status cannot be changed here"""
    event = await _get_event_or_404(event_id)
    await _ensure_owner(current_user, event.organization_id)
    return await event_service.update_event(
        event, update_data.model_dump(by_alias=True, exclude_none=True))


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: str,
    current_user: User = Depends(require_officer),
):
    event = await _get_event_or_404(event_id)
    await _ensure_owner(current_user, event.organization_id)
    await event_service.delete_event(event_id)


async def _toggle(event_id: str, user: User, kind: str) -> EngagementResponse:
    event = await _get_event_or_404(event_id)
    try:
        return await event_service.toggle_engagement(event, user, kind)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to toggle {kind} on {event_id} for {user.uid}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update {kind}",
        )


@router.post("/{event_id}/like", response_model=EngagementResponse)
async def toggle_like(event_id: str, current_user: User = Depends(get_current_user)):
    """Like the event, or remove the like if already given"""
    return await _toggle(event_id, current_user, "like")


@router.post("/{event_id}/interest", response_model=EngagementResponse)
async def toggle_interest(event_id: str, current_user: User = Depends(get_current_user)):
    """Mark interest in the event, or withdraw it"""
    return await _toggle(event_id, current_user, "interest")


@router.get("/{event_id}/comments", response_model=List[Comment])
async def list_comments(event_id: str):
    await _get_event_or_404(event_id)
    return await event_service.list_comments(event_id)


@router.post("/{event_id}/comments", response_model=Comment, status_code=status.HTTP_201_CREATED)
async def add_comment(
    event_id: str,
    comment_data: CommentCreate,
    current_user: User = Depends(get_current_user),
):
    await _get_event_or_404(event_id)
    return await event_service.add_comment(event_id, current_user, comment_data.comment)


@router.post("/{event_id}/images", response_model=EventImagesResponse)
async def upload_event_images(
    event_id: str,
    files: List[UploadFile] = File(...),
    current_user: User = Depends(require_officer),
):
    """Attach images to the event"""
    event = await _get_event_or_404(event_id)
    await _ensure_owner(current_user, event.organization_id)

    payload = []
    for upload in files:
        content = await upload.read()
        if not content:
            continue
        if len(content) > settings.max_upload_size_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"{upload.filename} exceeds {settings.MAX_UPLOAD_SIZE_MB} MB",
            )
        payload.append((upload.filename, content, upload.content_type))
    if not payload:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No files uploaded")

    try:
        images = await event_service.add_images(event, payload)
    except Exception as e:
        logger.error(f"Image upload failed for event {event_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to upload images",
        )
    return EventImagesResponse(event_id=event_id, event_images=images)
