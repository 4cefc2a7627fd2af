"""
Schemas for calendar views
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime


class CalendarEntry(BaseModel):
    id: str
    title: str
    start: Optional[datetime] = None
    is_task: bool = Field(False, alias="isTask")
    organization_id: str = Field("", alias="organizationId")
    background_color: str = Field(..., alias="backgroundColor")
    border_color: str = Field(..., alias="borderColor")
    text_color: str = Field("#ffffff", alias="textColor")
    display: str = "block"

    model_config = ConfigDict(populate_by_name=True)


class MonthGrid(BaseModel):
    year: int
    month: int
    cells: List[Optional[int]]
