"""
Organization model and Firestore conversion helpers
"""

from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict, field_validator

from app.models.status import OrganizationStatus, parse_status


DEFAULT_ORGANIZATION_PHOTO = "/assets/default.jpg"

# Category tags offered at registration; anything else is "Others".
KNOWN_CATEGORIES = ("academic", "sports", "interest")


class Organization(BaseModel):
    id: str
    name: str = ""
    email: Optional[str] = None
    description: str = ""
    photo: str = ""
    status: OrganizationStatus = OrganizationStatus.PENDING
    tags: List[str] = Field(default_factory=list)
    rejection_reason: Optional[str] = Field(None, alias="rejectionReason")
    has_seen_acceptance: bool = Field(False, alias="hasSeenAcceptance")
    members: List[str] = Field(default_factory=list)
    officers: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, v):
        return parse_status(OrganizationStatus, v)

    @field_validator("tags", "members", "officers", mode="before")
    @classmethod
    def _default_list(cls, v):
        return v if isinstance(v, list) else []

    @field_validator("name", "description", "photo", mode="before")
    @classmethod
    def _default_str(cls, v):
        return v or ""

    @field_validator("has_seen_acceptance", mode="before")
    @classmethod
    def _default_bool(cls, v):
        return bool(v)

    def matches_category(self, category: Optional[str]) -> bool:
        """Category filter used by the organization browser"""
        if not category or category == "All":
            return True
        lowered = [t.lower() for t in self.tags]
        if category == "Others":
            return not any(cat in lowered for cat in KNOWN_CATEGORIES)
        return category.lower() in lowered


class OfficerRoster(BaseModel):
    """
    Officer positions of an organization

    Collection: officers/
    Document ID: organizationId
    """

    organization_id: str = Field(..., alias="organizationId")
    president: str = ""
    vice_president: str = Field("", alias="vicePresident")
    secretary: str = ""
    treasurer: str = ""
    auditor: str = ""

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("president", "vice_president", "secretary", "treasurer", "auditor", mode="before")
    @classmethod
    def _default_str(cls, v):
        return v or ""

    def assigned_uids(self) -> List[str]:
        return [uid for uid in (
            self.president, self.vice_president, self.secretary,
            self.treasurer, self.auditor,
        ) if uid]


def firestore_organization_to_model(doc: dict, org_id: str) -> Organization:
    return Organization.model_validate({**(doc or {}), "id": org_id})


def organization_model_to_firestore(org: Organization) -> dict:
    data = org.model_dump(by_alias=True)
    data.pop("id", None)
    data["status"] = org.status.value
    if data.get("rejectionReason") is None:
        data.pop("rejectionReason", None)
    return data


def firestore_roster_to_model(doc: Optional[dict], org_id: str) -> OfficerRoster:
    return OfficerRoster.model_validate({**(doc or {}), "organizationId": org_id})


def roster_model_to_firestore(roster: OfficerRoster) -> dict:
    data = roster.model_dump(by_alias=True)
    data.pop("organizationId", None)
    return data
