"""
Schemas for events, engagement and comments
"""

from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, List, Union
from datetime import datetime

from app.models.event import parse_tags


class EventCreate(BaseModel):
    event_name: str = Field(..., min_length=1, alias="eventName")
    event_description: str = Field("", alias="eventDescription")
    event_date: datetime = Field(..., alias="eventDate")
    event_location: str = Field("", alias="eventLocation")
    event_price: float = Field(0.0, ge=0, alias="eventPrice")
    event_type: Optional[str] = Field(None, alias="eventType")
    is_free: bool = Field(True, alias="isFree")
    is_open_for_all: bool = Field(True, alias="isOpenForAll")
    tags: Union[str, List[str], None] = None
    organization_id: Optional[str] = Field(None, alias="organizationId")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "eventName": "Hackathon 2025",
                "eventDescription": "24 hours of building",
                "eventDate": "2025-03-14T09:00:00Z",
                "eventLocation": "Main Hall",
                "eventPrice": 0,
                "isFree": True,
                "isOpenForAll": True,
                "tags": "tech, coding",
            }
        },
    )

    @field_validator("tags", mode="after")
    @classmethod
    def split_tags(cls, v):
        return parse_tags(v)


class EventUpdate(BaseModel):
    """Editable event fields; status is not one of them"""

    event_name: Optional[str] = Field(None, min_length=1, alias="eventName")
    event_description: Optional[str] = Field(None, alias="eventDescription")
    event_date: Optional[datetime] = Field(None, alias="eventDate")
    event_location: Optional[str] = Field(None, alias="eventLocation")
    event_price: Optional[float] = Field(None, ge=0, alias="eventPrice")
    event_type: Optional[str] = Field(None, alias="eventType")
    is_free: Optional[bool] = Field(None, alias="isFree")
    is_open_for_all: Optional[bool] = Field(None, alias="isOpenForAll")
    tags: Union[str, List[str], None] = None

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("tags", mode="after")
    @classmethod
    def split_tags(cls, v):
        return None if v is None else parse_tags(v)


class EngagementResponse(BaseModel):
    event_id: str = Field(..., alias="eventId")
    active: bool
    count: int

    model_config = ConfigDict(populate_by_name=True)


class CommentCreate(BaseModel):
    comment: str = Field(..., min_length=1, max_length=2000)

    @field_validator("comment")
    @classmethod
    def strip_comment(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Comment cannot be empty")
        return v


class ReplyCreate(BaseModel):
    reply: str = Field(..., min_length=1, max_length=2000)

    @field_validator("reply")
    @classmethod
    def strip_reply(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Reply cannot be empty")
        return v


class EventImagesResponse(BaseModel):
    event_id: str = Field(..., alias="eventId")
    event_images: List[str] = Field(..., alias="eventImages")

    model_config = ConfigDict(populate_by_name=True)
