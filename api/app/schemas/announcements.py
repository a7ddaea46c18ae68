# api/app/schemas/announcements.py
from __future__ import annotations
from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict


class AnnouncementIn(BaseModel):
    title: str
    content: str


class AnnouncementOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    content: str
    is_active: bool
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
