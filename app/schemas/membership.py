"""
Schemas for join requests and member listings
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime


class ApplicationStatusEntry(BaseModel):
    """One row of a member's application status page"""

    membership_id: str = Field(..., alias="membershipId")
    organization_id: str = Field(..., alias="organizationId")
    organization_name: str = Field(..., alias="organizationName")
    photo: str
    status: str
    label: str
    rejection_reason: Optional[str] = Field(None, alias="rejectionReason")
    seen_by_user: bool = Field(False, alias="seenByUser")

    model_config = ConfigDict(populate_by_name=True)


class JoinRequestView(BaseModel):
    """A join request as listed for the organization's officers"""

    id: str
    uid: str
    organization_id: str = Field(..., alias="organizationId")
    status: str
    member_name: str = Field("Unknown", alias="memberName")
    email: Optional[str] = None
    course: Optional[str] = None
    year_level: Optional[str] = Field(None, alias="yearLevel")
    joined_at: Optional[datetime] = Field(None, alias="joinedAt")
    rejection_reason: Optional[str] = Field(None, alias="rejectionReason")

    model_config = ConfigDict(populate_by_name=True)


class MemberSummary(BaseModel):
    uid: str
    full_name: str = Field("", alias="fullName")
    email: str = ""
    course: Optional[str] = None
    year_level: Optional[str] = Field(None, alias="yearLevel")

    model_config = ConfigDict(populate_by_name=True)


class MarkSeenResponse(BaseModel):
    updated: int
