# api/app/schemas/halaqah.py
from __future__ import annotations
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict


class HalaqahIn(BaseModel):
    name: str
    teacher_id: Optional[UUID] = None
    description: Optional[str] = None


class HalaqahOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    teacher_id: Optional[UUID] = None
    description: Optional[str] = None
