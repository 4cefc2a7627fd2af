"""
Notification and audit log models
"""

from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator


def utc_now():
    return datetime.now(timezone.utc)


class Notification(BaseModel):
    """
    Collection: notifications/
    """

    id: str
    recipient_uid: str = Field(..., alias="recipientUid")
    type: Optional[str] = None
    message: str = ""
    read: bool = False
    timestamp: Optional[datetime] = None
    org_name: str = Field("", alias="orgName")
    org_profile_pic: str = Field("", alias="orgProfilePic")
    task_id: Optional[str] = Field(None, alias="taskId")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("read", mode="before")
    @classmethod
    def _default_bool(cls, v):
        return bool(v)

    @field_validator("message", "org_name", "org_profile_pic", mode="before")
    @classmethod
    def _default_str(cls, v):
        return v or ""


class AuditLog(BaseModel):
    """
    Append-only record of an admin decision

    Collection: auditLogs/
    """

    id: Optional[str] = None
    request_id: str = Field(..., alias="requestId")
    request_type: str = Field(..., alias="requestType")
    action: str
    admin_id: str = Field(..., alias="adminId")
    timestamp: datetime = Field(default_factory=utc_now)
    reason: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


def firestore_notification_to_model(doc: dict, notification_id: str) -> Notification:
    return Notification.model_validate({**(doc or {}), "id": notification_id})


def notification_model_to_firestore(notification: Notification) -> dict:
    data = notification.model_dump(by_alias=True, exclude_none=True)
    data.pop("id", None)
    return data


def audit_log_to_firestore(entry: AuditLog) -> dict:
    data = entry.model_dump(by_alias=True)
    data.pop("id", None)
    if data.get("reason") is None:
        data.pop("reason", None)
    return data


def firestore_audit_log_to_model(doc: dict, log_id: str) -> AuditLog:
    return AuditLog.model_validate({**(doc or {}), "id": log_id})
