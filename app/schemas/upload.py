"""
Schemas for the generic upload endpoint
"""

from pydantic import BaseModel


class UploadResponse(BaseModel):
    url: str
