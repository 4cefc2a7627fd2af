"""
User Models for the OMS Backend

This module defines the User and MemberProfile models that represent
account data stored in Firebase Firestore.
"""

from datetime import datetime, timezone
from typing import Optional, List
from enum import Enum
from pydantic import BaseModel, Field, ConfigDict, field_validator


# Helper function for timezone-aware UTC datetime
def utc_now():
    """Get current UTC datetime (timezone-aware)"""
    return datetime.now(timezone.utc)


class UserRole(str, Enum):
    """User role enumeration"""

    MEMBER = "member"
    ORGANIZATION = "organization"
    ADMIN = "admin"


class User(BaseModel):
    """
    Account document

    Collection: Users/
    Document ID: uid (Firebase Auth UID)

    Officers (role ``organization``) carry ``organizationId``; members carry
    ``memberId`` pointing at their profile in ``members/``.
    """

    uid: str = Field(..., description="Firebase Authentication UID")
    email: str = Field(default="")
    role: UserRole = Field(default=UserRole.MEMBER,
                           description="User role in the system")
    organization_id: Optional[str] = Field(
        default=None, alias="organizationId")
    member_id: Optional[str] = Field(default=None, alias="memberId")
    full_name: Optional[str] = Field(default=None, alias="fullName")
    course: Optional[str] = None
    year_level: Optional[str] = Field(default=None, alias="yearLevel")
    contact_number: Optional[str] = Field(default=None, alias="contactNumber")
    liked_events: List[str] = Field(
        default_factory=list, alias="likedEvents")
    interested_events: List[str] = Field(
        default_factory=list, alias="interestedEvents")
    created_at: Optional[datetime] = Field(
        default_factory=utc_now, alias="createdAt")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "uid": "firebase_user_uid_123",
                "email": "jane@school.edu",
                "role": "member",
                "memberId": "5d0f...",
                "fullName": "Jane Cruz",
                "likedEvents": [],
                "interestedEvents": [],
            }
        },
    )

    @field_validator("role", mode="before")
    @classmethod
    def _default_role(cls, v):
        if not v:
            return UserRole.MEMBER
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("liked_events", "interested_events", mode="before")
    @classmethod
    def _default_list(cls, v):
        return v if isinstance(v, list) else []

    @field_validator("year_level", "contact_number", mode="before")
    @classmethod
    def _stringify(cls, v):
        return None if v is None else str(v)

    @property
    def display_name(self) -> str:
        return self.full_name or self.email or "Anonymous"


class MemberProfile(BaseModel):
    """
    Member registration profile

    Collection: members/
    Document ID: memberId (generated at registration)
    """

    member_id: str = Field(..., alias="memberId")
    email: str
    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    full_name: str = Field(default="", alias="fullName")
    course: Optional[str] = None
    year_level: Optional[str] = Field(default=None, alias="yearLevel")
    contact_number: Optional[str] = Field(default=None, alias="contactNumber")
    role: str = "member"
    joined_at: datetime = Field(default_factory=utc_now, alias="joinedAt")

    model_config = ConfigDict(populate_by_name=True)


# Helper function to convert Firestore document to User model
def firestore_user_to_model(doc_data: dict, uid: str) -> User:
    return User.model_validate({**(doc_data or {}), "uid": uid})


# Helper function to convert User model to Firestore document
def user_model_to_firestore(user: User) -> dict:
    # Use by_alias=True to get camelCase for Firestore
    data = user.model_dump(by_alias=True, exclude_none=True)
    data["role"] = user.role.value
    # Exclude uid as it is the document ID
    data.pop("uid", None)
    return data


def member_profile_to_firestore(profile: MemberProfile) -> dict:
    data = profile.model_dump(by_alias=True)
    data.pop("memberId", None)
    return data
