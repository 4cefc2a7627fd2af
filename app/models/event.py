"""
Event and Comment Models for the OMS Backend

Event documents were written by several client versions, so the reader
accepts the older field names:

- ``approvalStatus`` for ``status`` (``approved`` means accepted)
- ``likedBy`` / ``interestedBy`` for ``likes`` / ``interested``
- numeric ``likes: 0`` counters, read as empty lists
"""

from datetime import datetime
from typing import Optional, List, Any, Dict
from pydantic import BaseModel, Field, ConfigDict, field_validator

from app.models.status import EventStatus, parse_status


def _parse_datetime(value):
    """Parse a datetime-like value, returning None when it cannot be read"""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def parse_tags(raw) -> List[str]:
    """Tags arrive as a list or a comma separated string"""
    if raw is None:
        return []
    if isinstance(raw, str):
        raw = raw.split(",")
    return [str(t).strip() for t in raw if str(t).strip()]


class Event(BaseModel):
    """
    Collection: events/
    Document ID: auto-generated, exposed as ``uid``
    """

    uid: str
    event_name: str = Field("", alias="eventName")
    event_description: str = Field("", alias="eventDescription")
    event_date: Optional[datetime] = Field(None, alias="eventDate")
    event_location: str = Field("", alias="eventLocation")
    event_price: float = Field(0.0, alias="eventPrice")
    event_type: Optional[str] = Field(None, alias="eventType")
    is_free: bool = Field(True, alias="isFree")
    is_open_for_all: bool = Field(True, alias="isOpenForAll")
    event_images: List[str] = Field(default_factory=list, alias="eventImages")
    organization_id: str = Field("", alias="organizationId")
    status: EventStatus = EventStatus.PENDING
    rejection_reason: Optional[str] = Field(None, alias="rejectionReason")
    likes: List[str] = Field(default_factory=list)
    interested: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, v):
        return parse_status(EventStatus, v)

    @field_validator("likes", "interested", "event_images", mode="before")
    @classmethod
    def _default_list(cls, v):
        return v if isinstance(v, list) else []

    @field_validator("tags", mode="before")
    @classmethod
    def _parse_tags(cls, v):
        return parse_tags(v)

    @field_validator("event_price", mode="before")
    @classmethod
    def _parse_price(cls, v):
        try:
            return float(v) if v not in (None, "") else 0.0
        except (TypeError, ValueError):
            return 0.0

    @field_validator("is_free", "is_open_for_all", mode="before")
    @classmethod
    def _parse_flag(cls, v):
        if isinstance(v, str):
            return v.strip().lower() in ("true", "yes", "1")
        return True if v is None else bool(v)

    @field_validator("event_date", "created_at", mode="before")
    @classmethod
    def _parse_dates(cls, v):
        return _parse_datetime(v)

    @field_validator("event_name", "event_description", "event_location", "organization_id", mode="before")
    @classmethod
    def _default_str(cls, v):
        return v or ""


class Comment(BaseModel):
    """
    Collection: comments/
    """

    uid: str
    event_id: str = Field(..., alias="eventId")
    comment: str = ""
    replies: List[str] = Field(default_factory=list)
    user_name: str = Field("Anonymous", alias="userName")
    user_email: Optional[str] = Field(None, alias="userEmail")
    timestamp: Optional[datetime] = None

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("replies", mode="before")
    @classmethod
    def _default_list(cls, v):
        return v if isinstance(v, list) else []

    @field_validator("timestamp", mode="before")
    @classmethod
    def _parse_ts(cls, v):
        return _parse_datetime(v)


def normalize_event_document(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Fold legacy field names into the canonical ones"""
    data = dict(doc or {})
    if not data.get("status") and data.get("approvalStatus"):
        data["status"] = data["approvalStatus"]
    for canonical, legacy in (("likes", "likedBy"), ("interested", "interestedBy")):
        current = data.get(canonical)
        old = data.get(legacy)
        if not isinstance(current, list) and isinstance(old, list):
            data[canonical] = old
        elif isinstance(current, list) and isinstance(old, list):
            data[canonical] = list(dict.fromkeys(current + old))
    return data


def firestore_event_to_model(doc: dict, event_id: str) -> Event:
    return Event.model_validate({**normalize_event_document(doc), "uid": event_id})


def event_model_to_firestore(event: Event) -> dict:
    data = event.model_dump(by_alias=True)
    data.pop("uid", None)
    data["status"] = event.status.value
    if data.get("rejectionReason") is None:
        data.pop("rejectionReason", None)
    return data


def firestore_comment_to_model(doc: dict, comment_id: str) -> Comment:
    return Comment.model_validate({**(doc or {}), "uid": comment_id})


def comment_model_to_firestore(comment: Comment) -> dict:
    data = comment.model_dump(by_alias=True)
    data.pop("uid", None)
    return data
