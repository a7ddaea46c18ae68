# api/app/schemas/students.py
from __future__ import annotations
from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field


class StudentIn(BaseModel):
    name: str = Field(..., description="Nama lengkap santri")
    halaqah: Optional[str] = Field(None, description="Kosong -> 'Belum ditentukan'")
    wali_name: Optional[str] = None
    wali_phone: Optional[str] = None


class StudentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    halaqah: str
    status: str
    average_score: float
    wali_name: Optional[str] = None
    wali_phone: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None


class WhatsappLinkOut(BaseModel):
    url: Optional[str] = None
