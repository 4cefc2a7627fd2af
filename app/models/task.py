"""
Task model and Firestore conversion helpers
"""

from datetime import datetime
from typing import Optional, List, Literal
from pydantic import BaseModel, Field, ConfigDict, field_validator


TaskTab = Literal["All", "Completed", "Not Completed"]


class Task(BaseModel):
    """
    Collection: tasks/
    """

    id: str
    task_name: str = Field("", alias="taskName")
    description: str = ""
    due_date: Optional[datetime] = Field(None, alias="dueDate")
    priority: str = "Medium"
    assigned_members: List[str] = Field(
        default_factory=list, alias="assignedMembers")
    organization_id: str = Field("", alias="organizationId")
    completed: bool = False

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("assigned_members", mode="before")
    @classmethod
    def _default_list(cls, v):
        return v if isinstance(v, list) else []

    @field_validator("completed", mode="before")
    @classmethod
    def _default_bool(cls, v):
        return bool(v)

    @field_validator("task_name", "description", "organization_id", mode="before")
    @classmethod
    def _default_str(cls, v):
        return v or ""

    @field_validator("priority", mode="before")
    @classmethod
    def _default_priority(cls, v):
        return v or "Medium"

    @field_validator("due_date", mode="before")
    @classmethod
    def _parse_due(cls, v):
        if v in (None, ""):
            return None
        if isinstance(v, str):
            try:
                return datetime.fromisoformat(v.replace("Z", "+00:00"))
            except ValueError:
                return None
        return v


def filter_tasks_by_tab(tasks: List[Task], tab: Optional[str]) -> List[Task]:
    """Same tabs as the task boards: All, Completed, Not Completed"""
    if tab == "Completed":
        return [t for t in tasks if t.completed]
    if tab == "Not Completed":
        return [t for t in tasks if not t.completed]
    return list(tasks)


def firestore_task_to_model(doc: dict, task_id: str) -> Task:
    return Task.model_validate({**(doc or {}), "id": task_id})


def task_model_to_firestore(task: Task) -> dict:
    data = task.model_dump(by_alias=True)
    data.pop("id", None)
    return data
