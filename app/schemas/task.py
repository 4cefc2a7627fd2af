"""
Schemas for organization tasks
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List, Literal
from datetime import datetime

from app.models.task import Task

Priority = Literal["Low", "Medium", "High"]


class TaskCreate(BaseModel):
    task_name: str = Field(..., min_length=1, alias="taskName")
    description: str = ""
    due_date: Optional[datetime] = Field(None, alias="dueDate")
    priority: Priority = "Medium"
    assigned_members: List[str] = Field(..., alias="assignedMembers")
    organization_id: Optional[str] = Field(None, alias="organizationId")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "taskName": "Book the venue",
                "description": "Reserve the gym for Friday",
                "dueDate": "2025-03-10T17:00:00Z",
                "priority": "High",
                "assignedMembers": ["uid_1", "uid_2"],
            }
        },
    )


class TaskUpdate(BaseModel):
    task_name: Optional[str] = Field(None, min_length=1, alias="taskName")
    description: Optional[str] = None
    due_date: Optional[datetime] = Field(None, alias="dueDate")
    priority: Optional[Priority] = None
    assigned_members: Optional[List[str]] = Field(None, alias="assignedMembers")

    model_config = ConfigDict(populate_by_name=True)


class TaskBoard(BaseModel):
    """Tasks for one tab plus the progress counters shown above the list"""

    tasks: List[Task]
    completed_count: int = Field(..., alias="completedCount")
    total_count: int = Field(..., alias="totalCount")

    model_config = ConfigDict(populate_by_name=True)
