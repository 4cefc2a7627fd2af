"""
Join request model

A membership document records a member's request to join an organization
and the officer's decision on it.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator

from app.models.status import MembershipStatus, parse_status


def membership_id(uid: str, organization_id: str) -> str:
    """Deterministic document id, one request per (member, organization)"""
    return f"{uid}_{organization_id}"


class Membership(BaseModel):
    """
    Collection: Members/
    Document ID: ``{uid}_{organizationId}``
    """

    id: str
    uid: str
    organization_id: str = Field(..., alias="organizationId")
    status: MembershipStatus = MembershipStatus.PENDING
    seen_by_user: bool = Field(False, alias="seenByUser")
    rejection_reason: Optional[str] = Field(None, alias="rejectionReason")
    joined_at: Optional[datetime] = Field(None, alias="joinedAt")
    approval_date: Optional[datetime] = Field(None, alias="approvalDate")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, v):
        return parse_status(MembershipStatus, v)

    @field_validator("seen_by_user", mode="before")
    @classmethod
    def _default_bool(cls, v):
        return bool(v)

    @property
    def is_decided(self) -> bool:
        return self.status != MembershipStatus.PENDING


def firestore_membership_to_model(doc: dict, doc_id: str) -> Membership:
    return Membership.model_validate({**(doc or {}), "id": doc_id})


def membership_model_to_firestore(membership: Membership) -> dict:
    data = membership.model_dump(by_alias=True)
    data.pop("id", None)
    data["status"] = membership.status.value
    if data.get("rejectionReason") is None:
        data.pop("rejectionReason", None)
    return data
