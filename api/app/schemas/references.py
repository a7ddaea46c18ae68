# api/app/schemas/references.py
from __future__ import annotations
from datetime import time
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict


class CriteriaIn(BaseModel):
    aspect: Literal["adab", "discipline"]
    title: str
    description: Optional[str] = None


class CriteriaOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    aspect: str
    title: str
    description: Optional[str] = None
    is_active: bool
    sort_order: int


class SessionIn(BaseModel):
    name: str
    time_start: Optional[time] = None
    time_end: Optional[time] = None


class SessionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    time_start: Optional[time] = None
    time_end: Optional[time] = None
    sort_order: int
    is_active: bool
