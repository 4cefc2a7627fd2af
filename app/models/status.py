"""
Status enums and the transition rules shared by every moderated entity

Organizations and events are moderated by an admin (pending -> accepted or
rejected). Join requests are moderated by an organization officer
(pending -> approved or rejected). Stored documents carry free-form strings,
so reads go through ``parse_status`` and writes through
``validate_transition``.
"""

from enum import Enum
from typing import Optional, Type, TypeVar


class OrganizationStatus(str, Enum):
    """Organization application status"""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class EventStatus(str, Enum):
    """Event submission status"""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class MembershipStatus(str, Enum):
    """Join request status"""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class DecisionAction(str, Enum):
    """Moderator decision"""

    ACCEPT = "accept"
    REJECT = "reject"


class RequestType(str, Enum):
    """Kinds of submission an admin moderates"""

    ORGANIZATION = "organization"
    EVENT = "event"


class InvalidTransitionError(ValueError):
    """Raised when a status change is not allowed from the current status"""

    def __init__(self, current: Enum, target: Enum):
        self.current = current
        self.target = target
        super().__init__(
            f"Cannot change status from '{current.value}' to '{target.value}'"
        )


StatusT = TypeVar("StatusT", OrganizationStatus, EventStatus, MembershipStatus)

# Spellings found in stored documents that mean the same thing.
_ALIASES = {
    "approved": "accepted",
    "accepted": "approved",
}


def parse_status(enum_cls: Type[StatusT], raw: Optional[str]) -> StatusT:
    """Normalise a stored status string, defaulting to pending"""
    if isinstance(raw, enum_cls):
        return raw
    if not raw or not isinstance(raw, str):
        return enum_cls("pending")
    value = raw.strip().lower()
    try:
        return enum_cls(value)
    except ValueError:
        pass
    alias = _ALIASES.get(value)
    if alias:
        try:
            return enum_cls(alias)
        except ValueError:
            pass
    return enum_cls("pending")


def target_for(enum_cls: Type[StatusT], action: DecisionAction) -> StatusT:
    """Map an accept/reject decision onto the entity's own status values"""
    if action == DecisionAction.REJECT:
        return enum_cls("rejected")
    if enum_cls is MembershipStatus:
        return MembershipStatus.APPROVED
    return enum_cls("accepted")


def validate_transition(current: StatusT, target: StatusT) -> StatusT:
    """
    Check a status change. Only pending requests can be decided.

    Raises:
        InvalidTransitionError: the change is not allowed
    """
    if type(current) is not type(target):
        raise TypeError("Status kinds do not match")
    if current.value != "pending" or target.value == "pending":
        raise InvalidTransitionError(current, target)
    return target


def normalize_reason(action: DecisionAction, reason: Optional[str]) -> Optional[str]:
    """
    Rejections need a non-empty reason; acceptances never carry one.

    Raises:
        ValueError: rejecting without a reason
    """
    if action == DecisionAction.ACCEPT:
        return None
    cleaned = (reason or "").strip()
    if not cleaned:
        raise ValueError("A rejection reason is required")
    return cleaned


def status_label(status: Enum) -> str:
    """Human label shown on status pages, e.g. 'Approved'"""
    value = status.value
    return value[:1].upper() + value[1:]
