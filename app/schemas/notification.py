"""
Schemas for the notification inbox
"""

from pydantic import BaseModel, Field
from typing import List


class NotificationIds(BaseModel):
    ids: List[str] = Field(..., min_length=1)


class CountResponse(BaseModel):
    count: int
