"""
Calendar views: events and tasks merged into one list of entries, plus the
month grid used to lay out a calendar page
"""

import calendar
from datetime import datetime, timezone
from typing import List, Optional

from app.models.event import Event
from app.models.status import EventStatus
from app.models.task import Task
from app.schemas.calendar import CalendarEntry
from app.services.event_service import event_service
from app.services.membership_service import membership_service
from app.services.task_service import task_service

EVENT_COLOR = "#4CAF50"
TASK_COLOR = "#FF5733"


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def event_entry(event: Event) -> CalendarEntry:
    return CalendarEntry(
        id=event.uid,
        title=event.event_name,
        start=event.event_date,
        is_task=False,
        organization_id=event.organization_id,
        background_color=EVENT_COLOR,
        border_color=EVENT_COLOR,
    )


def task_entry(task: Task) -> CalendarEntry:
    return CalendarEntry(
        id=task.id,
        title=task.task_name,
        start=task.due_date,
        is_task=True,
        organization_id=task.organization_id,
        background_color=TASK_COLOR,
        border_color=TASK_COLOR,
    )


def merge_entries(events: List[Event], tasks: List[Task]) -> List[CalendarEntry]:
    """Undated items cannot be placed on a calendar and are dropped"""
    entries = [event_entry(e) for e in events if e.event_date]
    entries += [task_entry(t) for t in tasks if t.due_date]
    entries.sort(key=lambda entry: _aware(entry.start))
    return entries


def month_grid(year: int, month: int) -> List[Optional[int]]:
    """
    Day cells of a Sunday-first month view.

    Leading ``None`` cells pad the first week up to the weekday of the 1st,
    followed by the day numbers 1..N.
    """
    first_weekday, days = calendar.monthrange(year, month)
    # monthrange counts Monday as 0
    offset = (first_weekday + 1) % 7
    return [None] * offset + list(range(1, days + 1))


class CalendarService:
    """Service for the organization and member calendars"""

    async def organization_calendar(
        self, organization_id: str, include_pending: bool = True
    ) -> List[CalendarEntry]:
        """
        Events and tasks of one organization.

        Rejected events never appear. Pending events are shown only when
        ``include_pending`` is set, which the officer view does.
        """
        events = [
            e for e in await event_service.list_for_organization(organization_id)
            if e.status == EventStatus.ACCEPTED
            or (include_pending and e.status == EventStatus.PENDING)
        ]
        board = await task_service.list_for_organization(organization_id)
        return merge_entries(events, board.tasks)

    async def member_calendar(self, uid: str) -> List[CalendarEntry]:
        organization_ids = await membership_service.approved_organization_ids(uid)
        events = await event_service.list_for_organizations(organization_ids)
        tasks = await task_service.tasks_for_member(uid)
        return merge_entries(events, tasks)


calendar_service = CalendarService()
