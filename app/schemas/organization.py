"""
Schemas for organization profiles, status page and officer roster
"""

from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, List


class OrganizationUpdate(BaseModel):
    """Fields an officer may edit; status is not one of them"""

    name: Optional[str] = Field(None, min_length=1, max_length=120)
    description: Optional[str] = None
    tags: Optional[List[str]] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Computer Society",
                "description": "Students building software together",
                "tags": ["Academic"],
            }
        }
    )

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Organization name cannot be blank")
        return v


class OrganizationStatusView(BaseModel):
    """What an officer sees on the application status page"""

    organization_id: str = Field(..., alias="organizationId")
    name: str
    status: str
    label: str
    rejection_reason: Optional[str] = Field(None, alias="rejectionReason")
    show_acceptance_notice: bool = Field(False, alias="showAcceptanceNotice")

    model_config = ConfigDict(populate_by_name=True)


class OfficerRosterUpdate(BaseModel):
    president: str = ""
    vice_president: str = Field("", alias="vicePresident")
    secretary: str = ""
    treasurer: str = ""
    auditor: str = ""

    model_config = ConfigDict(populate_by_name=True)


class OfficerSeat(BaseModel):
    position: str
    uid: str = ""
    full_name: Optional[str] = Field(None, alias="fullName")

    model_config = ConfigDict(populate_by_name=True)


class OfficerRosterResponse(BaseModel):
    organization_id: str = Field(..., alias="organizationId")
    officers: List[OfficerSeat]

    model_config = ConfigDict(populate_by_name=True)


class LogoUploadResponse(BaseModel):
    organization_id: str = Field(..., alias="organizationId")
    photo: str

    model_config = ConfigDict(populate_by_name=True)
