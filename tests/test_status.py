import pytest

from app.models.event import firestore_event_to_model
from app.models.status import (
    DecisionAction,
    EventStatus,
    InvalidTransitionError,
    MembershipStatus,
    OrganizationStatus,
    normalize_reason,
    parse_status,
    status_label,
    target_for,
    validate_transition,
)
from app.models.task import Task, filter_tasks_by_tab


def test_parse_status_normalises_stored_strings():
    assert parse_status(OrganizationStatus, "Accepted") == OrganizationStatus.ACCEPTED
    assert parse_status(EventStatus, "approved") == EventStatus.ACCEPTED
    assert parse_status(MembershipStatus, "accepted") == MembershipStatus.APPROVED
    assert parse_status(MembershipStatus, None) == MembershipStatus.PENDING
    assert parse_status(EventStatus, "archived") == EventStatus.PENDING


def test_only_pending_requests_can_be_decided():
    target = target_for(MembershipStatus, DecisionAction.ACCEPT)
    assert target == MembershipStatus.APPROVED
    assert validate_transition(MembershipStatus.PENDING, target) == target

    with pytest.raises(InvalidTransitionError):
        validate_transition(MembershipStatus.APPROVED, MembershipStatus.REJECTED)
    with pytest.raises(InvalidTransitionError):
        validate_transition(OrganizationStatus.PENDING, OrganizationStatus.PENDING)
    with pytest.raises(TypeError):
        validate_transition(OrganizationStatus.PENDING, EventStatus.ACCEPTED)


def test_rejection_requires_reason():
    with pytest.raises(ValueError):
        normalize_reason(DecisionAction.REJECT, "   ")
    assert normalize_reason(DecisionAction.REJECT, "  Missing adviser ") == "Missing adviser"
    assert normalize_reason(DecisionAction.ACCEPT, "ignored") is None


def test_status_label():
    assert status_label(MembershipStatus.APPROVED) == "Approved"
    assert status_label(OrganizationStatus.REJECTED) == "Rejected"


def test_legacy_event_fields_are_read():
    event = firestore_event_to_model({
        "eventName": "Fair",
        "approvalStatus": "approved",
        "likedBy": ["u1"],
        "interested": 0,
        "interestedBy": ["u2"],
        "tags": "tech, coding",
    }, "e1")
    assert event.status == EventStatus.ACCEPTED
    assert event.likes == ["u1"]
    assert event.interested == ["u2"]
    assert event.tags == ["tech", "coding"]


def test_task_tabs():
    tasks = [
        Task(id="a", completed=True),
        Task(id="b", completed=False),
        Task(id="c", completed=False),
    ]
    assert [t.id for t in filter_tasks_by_tab(tasks, "Completed")] == ["a"]
    assert [t.id for t in filter_tasks_by_tab(tasks, "Not Completed")] == ["b", "c"]
    assert len(filter_tasks_by_tab(tasks, "All")) == 3
