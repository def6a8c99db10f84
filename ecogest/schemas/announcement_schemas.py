# ecogest/schemas/announcement_schemas.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class AnnouncementCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)
    priority: str = Field(default="normal", pattern=r'^(low|normal|high)$')
    target_audience: List[str] = Field(default_factory=lambda: ["all"])
    is_urgent: bool = False
    is_published: bool = True
    expires_at: Optional[datetime] = None


class AnnouncementUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[str] = Field(default=None, min_length=1)
    priority: Optional[str] = Field(default=None, pattern=r'^(low|normal|high)$')
    target_audience: Optional[List[str]] = None
    is_urgent: Optional[bool] = None
    is_published: Optional[bool] = None
    expires_at: Optional[datetime] = None
