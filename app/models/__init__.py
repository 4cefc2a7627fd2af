from app.models.user import User, MemberProfile, UserRole
from app.models.organization import Organization, OfficerRoster
from app.models.membership import Membership
from app.models.event import Event, Comment
from app.models.task import Task
from app.models.notification import Notification, AuditLog
from app.models.status import (
    OrganizationStatus,
    EventStatus,
    MembershipStatus,
    DecisionAction,
    InvalidTransitionError,
)

__all__ = [
    "User",
    "MemberProfile",
    "UserRole",
    "Organization",
    "OfficerRoster",
    "Membership",
    "Event",
    "Comment",
    "Task",
    "Notification",
    "AuditLog",
    "OrganizationStatus",
    "EventStatus",
    "MembershipStatus",
    "DecisionAction",
    "InvalidTransitionError",
]
