"""
Authentication and registration request/response schemas
"""

from pydantic import BaseModel, EmailStr, Field, field_validator, ConfigDict
from typing import Optional, List


class AuthTokenRequest(BaseModel):
    """Schema for requests containing a Firebase ID token."""
    id_token: str = Field(..., alias="idToken",
                          description="Firebase ID token from client-side authentication.")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "idToken": "eyJhbGciOiJSUzI1NiIsImtpZCI6..."
            }
        }
    )


class Token(BaseModel):
    """Schema for authentication tokens"""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds


class TokenRefresh(BaseModel):
    """Schema for token refresh request"""

    refresh_token: str


class UserResponse(BaseModel):
    """Schema for user data response"""

    uid: str
    email: str
    role: str
    organization_id: Optional[str] = Field(None, alias="organizationId")
    member_id: Optional[str] = Field(None, alias="memberId")
    full_name: Optional[str] = Field(None, alias="fullName")
    course: Optional[str] = None
    year_level: Optional[str] = Field(None, alias="yearLevel")
    contact_number: Optional[str] = Field(None, alias="contactNumber")
    liked_events: List[str] = Field(default_factory=list, alias="likedEvents")
    interested_events: List[str] = Field(
        default_factory=list, alias="interestedEvents")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "uid": "abc123xyz",
                "email": "jane@school.edu",
                "role": "member",
                "memberId": "5d0f...",
                "fullName": "Jane Cruz",
                "likedEvents": [],
                "interestedEvents": [],
            }
        },
    )


class AuthResponse(BaseModel):
    """Complete authentication response with user data and tokens"""

    user: UserResponse
    tokens: Token


class MemberRegister(BaseModel):
    """Member sign-up form"""

    email: EmailStr
    password: str = Field(..., min_length=6,
                          description="Password must be at least 6 characters")
    first_name: str = Field(..., min_length=1, alias="firstName")
    last_name: str = Field(..., min_length=1, alias="lastName")
    course: str = Field(..., min_length=1)
    year_level: str = Field(..., min_length=1, alias="yearLevel")
    contact_number: str = Field(..., min_length=1, alias="contactNumber")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "email": "jane@school.edu",
                "password": "secret1",
                "firstName": "Jane",
                "lastName": "Cruz",
                "course": "BSIT",
                "yearLevel": "3",
                "contactNumber": "09171234567",
            }
        },
    )

    @field_validator("first_name", "last_name", "course", "year_level", "contact_number")
    @classmethod
    def strip_text(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Field cannot be blank")
        return v


class OrganizationRegister(BaseModel):
    """Organization application form"""

    name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    password: str = Field(..., min_length=6)
    description: str = ""
    tags: List[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Organization name cannot be blank")
        return v


class RegisterResponse(BaseModel):
    uid: str
    role: str
    organization_id: Optional[str] = Field(None, alias="organizationId")
    member_id: Optional[str] = Field(None, alias="memberId")

    model_config = ConfigDict(populate_by_name=True)


class ProfileUpdate(BaseModel):
    """Profile settings a user may change"""

    full_name: Optional[str] = Field(None, alias="fullName", min_length=1)
    course: Optional[str] = None
    year_level: Optional[str] = Field(None, alias="yearLevel")
    contact_number: Optional[str] = Field(None, alias="contactNumber")

    model_config = ConfigDict(populate_by_name=True)


def user_response(user) -> UserResponse:
    """Build the response schema from a ``User`` model"""
    data = user.model_dump(by_alias=True)
    data["role"] = user.role.value
    return UserResponse(**data)
