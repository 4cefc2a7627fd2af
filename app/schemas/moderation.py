"""
Schemas for the admin moderation dashboard
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime

from app.models.status import DecisionAction, RequestType


class ModerationRequest(BaseModel):
    """One organization application or event submission awaiting review"""

    id: str
    name: str
    type: RequestType
    submitted_by: str = Field("", alias="submittedBy")
    submission_date: str = Field("N/A", alias="submissionDate")
    status: str
    description: Optional[str] = None
    email: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class DecisionRequest(BaseModel):
    action: DecisionAction
    reason: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"action": "reject", "reason": "Incomplete requirements"}
        }
    )


class BulkDecisionItem(BaseModel):
    id: str
    type: RequestType


class BulkDecisionRequest(BaseModel):
    action: DecisionAction
    reason: Optional[str] = None
    requests: List[BulkDecisionItem] = Field(..., min_length=1)


class BulkFailure(BaseModel):
    id: str
    type: RequestType
    error: str


class BulkDecisionResult(BaseModel):
    action: DecisionAction
    processed: List[str] = Field(default_factory=list)
    failed: List[BulkFailure] = Field(default_factory=list)


class DecisionResponse(BaseModel):
    id: str
    type: RequestType
    status: str
    rejection_reason: Optional[str] = Field(None, alias="rejectionReason")

    model_config = ConfigDict(populate_by_name=True)


class AuditLogResponse(BaseModel):
    id: Optional[str] = None
    request_id: str = Field(..., alias="requestId")
    request_type: str = Field(..., alias="requestType")
    action: str
    admin_id: str = Field(..., alias="adminId")
    timestamp: datetime
    reason: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)
